"""Predicate expression tree.

Filters are built as immutable trees of :class:`Condition` leaves joined by
:class:`Combination` nodes, then compiled to a WHERE fragment for one
dialect::

    >>> expr = Condition("age", Operator.GREATER_THAN, 30) & Condition("name", "IS_NOT_NULL")
    >>> expr.to_where_clause("mssql")
    "(age > '30') AND (name IS NOT NULL)"
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, List, Optional, Union

from pydantic import ConfigDict, Field, field_validator

from dbwrapper.common.exceptions import invalid_argument_error
from dbwrapper.constants.database import DatabaseType
from dbwrapper.constants.sql import LogicalOperator
from dbwrapper.expressions.operators import Operator, get_renderer, normalize_operator
from dbwrapper.types.base import DbWrapperBaseModel

if TYPE_CHECKING:
    from dbwrapper.query_builder.formatting import ValueFormatter


Dialect = Union[DatabaseType, str, "ValueFormatter"]


def _resolve_formatter(dialect: Dialect) -> "ValueFormatter":
    from dbwrapper.query_builder.factory import get_value_formatter
    from dbwrapper.query_builder.formatting import ValueFormatter

    if isinstance(dialect, ValueFormatter):
        return dialect
    return get_value_formatter(dialect)


class Predicate(DbWrapperBaseModel, ABC):
    """Base node of a filter expression."""

    model_config = ConfigDict(frozen=True)

    @abstractmethod
    def render(self, formatter: "ValueFormatter") -> str:
        pass

    @abstractmethod
    def columns(self) -> List[str]:
        """Column names referenced anywhere in the tree, in order of appearance."""
        pass

    def to_where_clause(self, dialect: Dialect) -> str:
        """Compile the tree to a WHERE fragment (without the keyword).

        Args:
            dialect: DatabaseType, its string value, or a ValueFormatter
        """
        return self.render(_resolve_formatter(dialect))

    def and_(self, other: "Predicate") -> "Combination":
        return Combination(left=self, logical_operator=LogicalOperator.AND, right=other)

    def or_(self, other: "Predicate") -> "Combination":
        return Combination(left=self, logical_operator=LogicalOperator.OR, right=other)

    def __and__(self, other: "Predicate") -> "Combination":
        if not isinstance(other, Predicate):
            return NotImplemented
        return self.and_(other)

    def __or__(self, other: "Predicate") -> "Combination":
        if not isinstance(other, Predicate):
            return NotImplemented
        return self.or_(other)


class Condition(Predicate):
    """Leaf comparing one column with a value.

    Attributes:
        left_term: Column name, emitted verbatim
        operator: Built-in :class:`Operator` or the name of a registered one
        right_term: Value formatted through the dialect's ValueFormatter
    """

    left_term: str
    operator: Union[Operator, str]
    right_term: Any = Field(default=None)

    def __init__(self, left_term: Optional[str] = None, operator: Union[Operator, str, None] = None,
                 right_term: Any = None, **data: Any):
        data.setdefault("left_term", left_term)
        data.setdefault("operator", operator)
        if right_term is not None:
            data["right_term"] = right_term
        super().__init__(**data)

    @field_validator("left_term", mode="before")
    @classmethod
    def validate_left_term(cls, v: Any) -> str:
        if v is None or not str(v).strip():
            raise invalid_argument_error("left_term", "Condition column name must not be null or empty")
        return str(v).strip()

    @field_validator("operator", mode="before")
    @classmethod
    def validate_operator(cls, v: Any) -> Union[Operator, str]:
        key = normalize_operator(v)
        try:
            return Operator(key)
        except ValueError:
            return key

    def render(self, formatter: "ValueFormatter") -> str:
        return get_renderer(self.operator)(self.left_term, self.right_term, formatter)

    def columns(self) -> List[str]:
        return [self.left_term]


class Combination(Predicate):
    """Two predicates joined by AND or OR."""

    left: Predicate
    logical_operator: LogicalOperator
    right: Predicate

    def render(self, formatter: "ValueFormatter") -> str:
        return (
            f"({self.left.render(formatter)}) "
            f"{self.logical_operator.value} "
            f"({self.right.render(formatter)})"
        )

    def columns(self) -> List[str]:
        seen: List[str] = []
        for name in self.left.columns() + self.right.columns():
            if name not in seen:
                seen.append(name)
        return seen


def compile_where(expression: Optional[Predicate], dialect: Dialect) -> str:
    """Compile ``expression`` for ``dialect``; an absent filter yields ``""``."""
    if expression is None:
        return ""
    return expression.to_where_clause(dialect)
