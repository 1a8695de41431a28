"""
Error tracking via Sentry.

Sentry is initialized only when SENTRY_DSN is configured. All functions are
safe to call when it is not: capture_error becomes a no-op.

Usage:
    from talentproof.observability import capture_error, init_error_tracking

    init_error_tracking()  # at application startup

    try:
        risky_operation()
    except Exception as e:
        capture_error(e, context={"operation": "risky"})
        raise
"""

import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from talentproof.core.config import settings

logger = logging.getLogger(__name__)

_initialized = False


def _serialize_value(value: Any) -> Any:
    """Convert a context value to a JSON-compatible type."""
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _serialize_value(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_serialize_value(item) for item in value]
    return str(value)


def init_error_tracking(
    dsn: Optional[str] = None,
    environment: Optional[str] = None,
    traces_sample_rate: Optional[float] = None,
) -> bool:
    """
    Initialize the Sentry SDK with FastAPI/Starlette integrations.

    Returns:
        True if Sentry was initialized, False if skipped (no DSN) or failed.

    Note:
        Does not raise exceptions - failures are logged and return False.
    """
    global _initialized

    dsn = settings.SENTRY_DSN if dsn is None else dsn
    if not dsn:
        logger.debug("Sentry initialization skipped (DSN not configured)")
        return False

    try:
        import sentry_sdk
        from sentry_sdk.integrations.fastapi import FastApiIntegration
        from sentry_sdk.integrations.logging import LoggingIntegration
        from sentry_sdk.integrations.starlette import StarletteIntegration

        sentry_sdk.init(
            dsn=dsn,
            environment=environment or settings.ENV,
            release=settings.APP_VERSION,
            traces_sample_rate=(
                settings.SENTRY_TRACES_SAMPLE_RATE
                if traces_sample_rate is None
                else traces_sample_rate
            ),
            send_default_pii=False,
            integrations=[
                LoggingIntegration(level=None, event_level=None),
                StarletteIntegration(transaction_style="endpoint"),
                FastApiIntegration(transaction_style="endpoint"),
            ],
        )
        _initialized = True
        logger.info(f"Sentry initialized for environment '{environment or settings.ENV}'")
        return True
    except Exception as e:
        logger.warning(f"Failed to initialize Sentry: {e}")
        return False


def is_initialized() -> bool:
    return _initialized


def capture_error(
    exc: BaseException,
    context: Optional[Dict[str, Any]] = None,
    tags: Optional[Dict[str, str]] = None,
) -> Optional[str]:
    """
    Send an exception to Sentry with optional context and tags.

    Returns:
        The Sentry event id, or None if Sentry is not initialized.
    """
    if not _initialized:
        return None

    import sentry_sdk

    with sentry_sdk.new_scope() as scope:
        if context:
            scope.set_context(
                "details", {k: _serialize_value(v) for k, v in context.items()}
            )
        for key, value in (tags or {}).items():
            scope.set_tag(key, value)
        return sentry_sdk.capture_exception(exc)


def shutdown_error_tracking(timeout: float = 2.0) -> None:
    """Flush pending Sentry events."""
    global _initialized

    if not _initialized:
        return

    import sentry_sdk

    sentry_sdk.flush(timeout=timeout)
    _initialized = False
