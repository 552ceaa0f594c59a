"""
Centralized logging configuration for the stream window allocator.

This module provides standardized logging configuration using structlog
for all components. Allocation decisions, validation outcomes and repository
writes all go through this configuration so that audit records share one
structured format.
"""
import logging
import sys
from typing import Any, Optional

import structlog
from structlog.types import FilteringBoundLogger


def configure_logging(
    level: str = "INFO",
    format_json: bool = False,
    include_timestamp: bool = True,
    include_caller: bool = False,
    extra_processors: Optional[list] = None
) -> None:
    """
    Route allocator, repository and ingestion logs through structlog.

    Audit records carry their decision fields as structured keys, so JSON
    output is the form to ship to a log store; console output suits the
    scripts and examples.

    Args:
        level: Minimum stdlib level name, e.g. "INFO" or "DEBUG"
        format_json: Render one JSON object per record instead of console lines
        include_timestamp: Add an ISO timestamp to every record
        include_caller: Add the emitting file name and line number
        extra_processors: Processors inserted just before the renderer
    """
    log_level = getattr(logging, level.upper())

    logging.basicConfig(
        level=log_level,
        stream=sys.stdout,
        format="%(message)s"  # structlog will handle formatting
    )

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if include_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))

    if include_caller:
        processors.append(structlog.processors.CallsiteParameterAdder(
            parameters=[structlog.processors.CallsiteParameter.FILENAME,
                        structlog.processors.CallsiteParameter.LINENO]
        ))

    if extra_processors:
        processors.extend(extra_processors)

    if format_json:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> FilteringBoundLogger:
    """
    Get a configured structlog logger instance.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger instance
    """
    return structlog.get_logger(name)


def get_allocator_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger specifically configured for allocation decisions.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the allocator subsystem
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="allocator",
        audit_trail=True
    )


def get_repository_logger(name: str) -> FilteringBoundLogger:
    """
    Get a logger specifically configured for window repository writes.

    Args:
        name: Logger name (typically __name__)

    Returns:
        Configured structlog logger bound to the repository subsystem
    """
    logger = get_logger(name)

    return logger.bind(
        subsystem="repository",
        audit_trail=True
    )


def log_allocation_decision(
    logger: FilteringBoundLogger,
    symbol: str,
    strategy: str,
    found: bool,
    max_days: int,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a window search outcome with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Symbol the search ran for
        strategy: Search branch that decided the outcome
        found: Whether a free window was found
        max_days: Capacity applied to the search
        context: Additional context data (window bounds, existing count)
    """
    bound_logger = logger.bind(
        symbol=symbol,
        strategy=strategy,
        allocation_result="FOUND" if found else "NOT_FOUND",
        max_days=max_days,
        decision="window_allocation"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if found:
        bound_logger.info("Available window found")
    else:
        bound_logger.warning("No available window")


def log_validation_decision(
    logger: FilteringBoundLogger,
    symbol: str,
    valid: bool,
    reason: Optional[str] = None,
    context: Optional[dict[str, Any]] = None
) -> None:
    """
    Log a proposed-window validation with standardized format.

    Args:
        logger: Structlog logger instance
        symbol: Symbol the window was proposed for
        valid: Whether the window is free
        reason: Conflict description when invalid
        context: Additional context data
    """
    bound_logger = logger.bind(
        symbol=symbol,
        validation_result="VALID" if valid else "CONFLICT",
        reason=reason,
        decision="window_validation"
    )

    if context:
        bound_logger = bound_logger.bind(context=context)

    if valid:
        bound_logger.info("Proposed window is free")
    else:
        bound_logger.warning("Proposed window conflicts")
