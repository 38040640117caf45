"""Error reporting setup."""

import sentry_sdk
import structlog
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

from growth_catalyst.core.errors import DomainError

logger = structlog.get_logger()

REDACTED = "[REDACTED]"
_PRIVATE_HEADERS = frozenset({"authorization", "cookie"})


def before_send(event: dict, hint: dict) -> dict | None:
    """Drop expected business failures and mask credentials on the rest."""
    exc_info = hint.get("exc_info")
    if exc_info and isinstance(exc_info[1], DomainError):
        return None

    headers = event.get("request", {}).get("headers") or {}
    for name in [h for h in headers if h.lower() in _PRIVATE_HEADERS]:
        headers[name] = REDACTED
    return event


def init_sentry(dsn: str | None, environment: str = "development", release: str | None = None) -> bool:
    if not dsn:
        logger.info("sentry_disabled")
        return False

    sample_rate = 0.1 if environment == "production" else 1.0
    sentry_sdk.init(
        dsn=dsn,
        environment=environment,
        release=release,
        traces_sample_rate=sample_rate,
        integrations=[FastApiIntegration(transaction_style="endpoint"), SqlalchemyIntegration()],
        send_default_pii=False,
        before_send=before_send,
    )
    logger.info("sentry_enabled", environment=environment, release=release)
    return True
