"""Logfire observability initialization and instrumentation."""

import logging

import logfire

from docrepo import __version__
from docrepo.config import Settings

logger = logging.getLogger(__name__)


def initialize_logfire(settings: Settings) -> None:
    """
    Initialize Logfire with MongoDB instrumentation.

    Must be called ONCE at application startup, before repositories are used.

    This function configures Logfire cloud tracking and instruments:
    - PyMongo commands (issued underneath Motor)
    - Python logging (bridges to Logfire)

    Args:
        settings: Application settings containing Logfire token
    """
    if not settings.logfire_token:
        logger.warning("Logfire token not set - observability disabled")
        return

    try:
        logfire.configure(
            token=settings.logfire_token,
            service_name="docrepo",
            service_version=__version__,
            environment=settings.environment,
        )

        # Requires the logfire[pymongo] extra
        try:
            logfire.instrument_pymongo()
        except Exception as instrument_error:
            logger.debug(f"PyMongo instrumentation skipped: {instrument_error}")

        root_logger = logging.getLogger()
        root_logger.addHandler(logfire.LogfireLoggingHandler())

        logger.info("Logfire tracking initialized")

    except Exception as e:
        logger.warning(f"Failed to initialize Logfire: {e}")
