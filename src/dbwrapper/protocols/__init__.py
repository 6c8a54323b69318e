"""Protocol definitions for dbwrapper collaborators."""

from dbwrapper.protocols.executor import QueryExecutor

__all__ = [
    "QueryExecutor",
]
