import logging
import time
from collections.abc import Mapping

from configs import app_config
from libs.fetch import FetchClient, Middleware, Transport

logger = logging.getLogger(__name__)


def initialize_extensions() -> None:
    from extensions import ext_logging

    extensions = [ext_logging]
    for ext in extensions:
        short_name = ext.__name__.split(".")[-1]
        start_time = time.perf_counter()
        ext.init_app()
        end_time = time.perf_counter()
        logger.debug("Loaded %s (%s ms)", short_name, round((end_time - start_time) * 1000, 2))


def create_client(
    transport: Transport | None = None,
    middlewares: list[Middleware] | None = None,
    default_headers: Mapping[str, str] | None = None,
) -> FetchClient:
    """Set up logging from ``app_config`` and return a ready ``FetchClient``.

    This is the entry point for applications. Importing ``libs.fetch`` alone
    leaves logging configuration to the caller.
    """
    initialize_extensions()
    logger.info(f"{app_config.PROJECT_NAME} {app_config.CURRENT_VERSION} ready")
    return FetchClient(transport=transport, middlewares=middlewares, default_headers=default_headers)
