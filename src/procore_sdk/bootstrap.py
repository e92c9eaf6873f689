"""Process startup: logging and the one-time licensing notice."""

from __future__ import annotations

import logging

logger = logging.getLogger("procore_sdk")

LICENSING_NOTICE = (
    "[Velocity BPA Licensing Notice] "
    "This Procore integration is licensed under the Business Source License 1.1 (BSL 1.1). "
    "Use by for-profit organizations in production environments requires a commercial "
    "license from Velocity BPA. For licensing information, visit https://velobpa.com/licensing "
    "or contact licensing@velobpa.com."
)


def configure_logging(debug: bool = False) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    # httpx logs every request at INFO.
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)


def log_licensing_notice() -> None:
    """Emit the licensing notice.  Call once, from process startup."""
    logger.warning(LICENSING_NOTICE)
