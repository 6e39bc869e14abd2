from typing import Any

import orjson
from loguru import logger as log

from elastic_builder.config.general import CONFIG


def trace_document(kind: str, document: Any) -> None:
    """Log a built document as JSON when document tracing is enabled."""
    if not CONFIG.builder.trace_documents:
        return
    try:
        rendered = orjson.dumps(
            document, default=str, option=orjson.OPT_NON_STR_KEYS
        ).decode()
    except orjson.JSONEncodeError:
        # orjson rejects ints wider than 64 bits without consulting `default`
        rendered = repr(document)
    log.bind(scope=kind).trace(f"Built {kind} document: {rendered}")
