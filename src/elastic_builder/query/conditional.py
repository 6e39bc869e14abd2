from collections.abc import Callable
from typing import Any

from loguru import logger as log

from elastic_builder.utils.general import is_truthy


def when[B, R](
    builder: B,
    condition: Any,
    then: Callable[[B], R],
    otherwise: Callable[[B], R] | None = None,
) -> R | None:
    """Apply `then` to the builder if the condition holds, else `otherwise`.

    Returns None when the condition is falsy and there is no `otherwise`.
    None means "no contribution"; substituting a fallback such as match_all
    is left to the caller, e.g. `q.when(x, f) or q.match_all()`.
    """
    if is_truthy(condition):
        return then(builder)
    if otherwise is not None:
        return otherwise(builder)
    log.trace(f"Condition {condition!r} is falsy, no branch applied.")
    return None
