import copy
import numbers
from collections.abc import Iterable, Mapping, Sized
from typing import Any


class BuilderUsageError(Exception):
    """A builder was used in a way that can never produce a valid document."""


class SubAggregationError(BuilderUsageError):
    """A sub-aggregation was attached to a scope with no aggregation in it."""


def is_truthy(condition: Any) -> bool:
    """Decide whether a condition enables a conditional branch.

    Falsy values are exactly: None, False, numeric zero, NaN, and empty
    strings, bytes or collections. Everything else is truthy, and an
    object's own __bool__ is never consulted.
    """
    if condition is None or condition is False:
        return False
    if isinstance(condition, numbers.Number):
        # NaN is the only value unequal to itself
        if condition != condition:  # noqa: PLR0124
            return False
        return condition != 0
    if isinstance(condition, str | bytes | Sized):
        return len(condition) > 0
    return True


def with_options(value_key: str, value: Any, options: Mapping[str, Any]) -> Any:
    """Expand a bare value into an options object only when options were given."""
    if not options:
        return value
    return {value_key: value, **options}


def as_list(values: str | Iterable[Any]) -> list[Any]:
    """Listify values, treating a bare string as a single value."""
    if isinstance(values, str):
        return [values]
    return list(values)


def detach(document: Any) -> Any:
    """Return a copy of a document that shares no mutable state with the builder."""
    return copy.deepcopy(document)
