"""Context propagation for logging.

Each generation run binds its own id into structlog contextvars, so
concurrent runs in one event loop log distinguishably.

Usage:
    from llm2ui.logging.context import generation_scope

    with generation_scope() as generation_id:
        get_current_logger().info("generation_started")
"""

from contextlib import contextmanager
from typing import Any, Generator, Optional
from uuid import uuid4

import structlog

from llm2ui.protocols import LoggerProtocol


@contextmanager
def bind_logger_context(**kwargs: Any) -> Generator[LoggerProtocol, None, None]:
    """Temporarily bind additional context to the current logger.

    Usage:
        with bind_logger_context(layer="props-validation"):
            get_current_logger().debug("layer_started")
    """
    from llm2ui.logging import _current_logger, get_current_logger

    bound = get_current_logger().bind(**kwargs)
    token = _current_logger.set(bound)

    try:
        yield bound
    finally:
        _current_logger.reset(token)


@contextmanager
def generation_scope(
    generation_id: Optional[str] = None,
    logger: Optional[LoggerProtocol] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind a generation id to every log line emitted within the scope.

    Args:
        generation_id: Id to bind (a uuid4 hex string is generated if None)
        logger: Optional logger to install as the current logger
        **extra_context: Additional fields to bind

    Yields:
        The generation id in effect
    """
    from llm2ui.logging import _current_logger

    generation_id = generation_id or uuid4().hex
    tokens = structlog.contextvars.bind_contextvars(
        generation_id=generation_id,
        **extra_context,
    )
    logger_token = _current_logger.set(logger) if logger is not None else None

    try:
        yield generation_id
    finally:
        if logger_token is not None:
            _current_logger.reset(logger_token)
        structlog.contextvars.reset_contextvars(**tokens)
