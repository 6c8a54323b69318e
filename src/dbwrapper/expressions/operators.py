"""Comparison operators for predicate expressions.

Each operator maps to a renderer that turns ``(left, right, formatter)``
into a SQL fragment. The built-in set covers comparisons, null checks,
set membership and LIKE patterns; further operators can be registered at
runtime with :func:`register_operator`.
"""

from collections.abc import Iterable
from enum import Enum
from typing import TYPE_CHECKING, Any, Callable, Dict, List, Union

from dbwrapper.common.exceptions import invalid_argument_error

if TYPE_CHECKING:
    from dbwrapper.query_builder.formatting import ValueFormatter


OperatorRenderer = Callable[[str, Any, "ValueFormatter"], str]


class Operator(str, Enum):
    """Built-in comparison operators."""

    EQUALS = "EQUALS"
    NOT_EQUALS = "NOT_EQUALS"
    GREATER_THAN = "GREATER_THAN"
    GREATER_THAN_OR_EQUAL_TO = "GREATER_THAN_OR_EQUAL_TO"
    LESS_THAN = "LESS_THAN"
    LESS_THAN_OR_EQUAL_TO = "LESS_THAN_OR_EQUAL_TO"
    IS_NULL = "IS_NULL"
    IS_NOT_NULL = "IS_NOT_NULL"
    IN = "IN"
    NOT_IN = "NOT_IN"
    CONTAINS = "CONTAINS"
    CONTAINS_NOT = "CONTAINS_NOT"
    STARTS_WITH = "STARTS_WITH"
    ENDS_WITH = "ENDS_WITH"


def _comparison(symbol: str, null_form: str = "") -> OperatorRenderer:
    def render(left: str, right: Any, formatter: "ValueFormatter") -> str:
        if right is None and null_form:
            return f"{left} {null_form}"
        return f"{left} {symbol} {formatter.format_literal(right)}"
    return render


def _null_check(keyword: str) -> OperatorRenderer:
    def render(left: str, right: Any, formatter: "ValueFormatter") -> str:
        return f"{left} {keyword}"
    return render


def _membership(keyword: str) -> OperatorRenderer:
    def render(left: str, right: Any, formatter: "ValueFormatter") -> str:
        if isinstance(right, (str, bytes)) or not isinstance(right, Iterable):
            raise invalid_argument_error(
                "right_term",
                f"Operator {keyword} on column {left} requires a sequence of values",
            )
        items = list(right)
        if not items:
            raise invalid_argument_error(
                "right_term",
                f"Operator {keyword} on column {left} requires at least one value",
            )
        literals = ",".join(formatter.format_literal(item) for item in items)
        return f"{left} {keyword} ({literals})"
    return render


def _pattern(keyword: str, prefix: str, suffix: str) -> OperatorRenderer:
    def render(left: str, right: Any, formatter: "ValueFormatter") -> str:
        return f"{left} {keyword} {formatter.format_like(right, prefix, suffix)}"
    return render


_RENDERERS: Dict[str, OperatorRenderer] = {
    Operator.EQUALS.value: _comparison("=", "IS NULL"),
    Operator.NOT_EQUALS.value: _comparison("<>", "IS NOT NULL"),
    Operator.GREATER_THAN.value: _comparison(">"),
    Operator.GREATER_THAN_OR_EQUAL_TO.value: _comparison(">="),
    Operator.LESS_THAN.value: _comparison("<"),
    Operator.LESS_THAN_OR_EQUAL_TO.value: _comparison("<="),
    Operator.IS_NULL.value: _null_check("IS NULL"),
    Operator.IS_NOT_NULL.value: _null_check("IS NOT NULL"),
    Operator.IN.value: _membership("IN"),
    Operator.NOT_IN.value: _membership("NOT IN"),
    Operator.CONTAINS.value: _pattern("LIKE", "%", "%"),
    Operator.CONTAINS_NOT.value: _pattern("NOT LIKE", "%", "%"),
    Operator.STARTS_WITH.value: _pattern("LIKE", "", "%"),
    Operator.ENDS_WITH.value: _pattern("LIKE", "%", ""),
}


def normalize_operator(operator: Union[Operator, str]) -> str:
    """Return the registry key for ``operator``.

    Raises:
        DatabaseClientError: INVALID_ARGUMENT when the operator is unknown
    """
    if isinstance(operator, Operator):
        return operator.value
    key = (operator or "").strip().upper() if isinstance(operator, str) else ""
    if key not in _RENDERERS:
        raise invalid_argument_error("operator", f"Unknown comparison operator: {operator!r}")
    return key


def register_operator(name: str, renderer: OperatorRenderer, replace: bool = False) -> str:
    """Register an additional comparison operator.

    Args:
        name: Operator name, matched case-insensitively by ``Condition``
        renderer: Callable ``(left, right, formatter) -> str``
        replace: Allow overriding an existing operator

    Returns:
        The normalized registry key

    Example:
        >>> register_operator(
        ...     "REGEXP",
        ...     lambda left, right, fmt: f"{left} REGEXP {fmt.format_literal(right)}",
        ... )
        'REGEXP'
    """
    key = (name or "").strip().upper()
    if not key:
        raise invalid_argument_error("name")
    if not callable(renderer):
        raise invalid_argument_error("renderer", "Operator renderer must be callable")
    if key in _RENDERERS and not replace:
        raise invalid_argument_error("name", f"Operator {key} is already registered")
    _RENDERERS[key] = renderer
    return key


def get_renderer(operator: Union[Operator, str]) -> OperatorRenderer:
    return _RENDERERS[normalize_operator(operator)]


def registered_operators() -> List[str]:
    """Names of every operator currently available."""
    return sorted(_RENDERERS)
