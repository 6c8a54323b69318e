"""Executor protocol.

The statement layer never talks to a driver directly. Anything that can
run a SQL string and hand back a DataFrame can sit behind the client.
"""

from typing import Protocol, runtime_checkable

import pandas as pd


@runtime_checkable
class QueryExecutor(Protocol):
    """Runs statement text against a live database."""

    def execute(self, query: str) -> pd.DataFrame:
        """Execute ``query`` and return the first result set.

        Multi-statement batches return the first set that carries rows.
        Statements that produce no result set return an empty DataFrame.
        Failures are raised as ``DatabaseClientError`` with
        ``QUERY_EXECUTION_ERROR``.
        """
        ...
