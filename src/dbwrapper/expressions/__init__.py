"""Predicate expressions compiled to WHERE clauses."""

from dbwrapper.expressions.operators import (
    Operator,
    OperatorRenderer,
    register_operator,
    registered_operators,
)
from dbwrapper.expressions.predicate import (
    Combination,
    Condition,
    Predicate,
    compile_where,
)

__all__ = [
    "Operator",
    "OperatorRenderer",
    "register_operator",
    "registered_operators",
    "Predicate",
    "Condition",
    "Combination",
    "compile_where",
]
