import os
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI
import structlog

from core.credentials import credential_provider
from core.infrastructure.http_client import init_http_client, close_http_client
from core.metadata import SERVICE_NAME, VERSION
from config.meta import MetaConfig

logger = structlog.get_logger(__name__)

STARTUP_BANNER = """
╔══════════════════════════════════════════════╗
║  {service} v{version}
║  Python {python} | env: {env} | {log_level}
║  Graph API {api_version}
╚══════════════════════════════════════════════╝"""

SHUTDOWN_BANNER = """
╔══════════════════════════════════════════════╗
║  {service} v{version} shutting down
╚══════════════════════════════════════════════╝"""


@asynccontextmanager
async def lifespan(app: FastAPI):
    try:
        init_http_client()
        logger.info("HTTP client initialized", component="http")

        if credential_provider.is_expired():
            logger.warning("Meta access token missing or expired", component="credentials")

        environment = os.getenv("ENVIRONMENT", "local")
        log_level = os.getenv("LOG_LEVEL", "INFO").upper()
        python_version = sys.version.split()[0]

        print(
            STARTUP_BANNER.format(
                service=SERVICE_NAME,
                version=VERSION,
                python=python_version,
                env=environment,
                log_level=log_level,
                api_version=MetaConfig.API_VERSION,
            )
        )
        logger.info(
            "Service started",
            service=SERVICE_NAME,
            version=VERSION,
            python=python_version,
            environment=environment,
            log_level=log_level,
            graph_api_version=MetaConfig.API_VERSION,
        )
        yield
    finally:
        print(SHUTDOWN_BANNER.format(service=SERVICE_NAME, version=VERSION))
        logger.info("Service shutting down", service=SERVICE_NAME, version=VERSION)
        await close_http_client()
        logger.info("HTTP client closed", component="http")
