import logging
import os
from pathlib import Path

import sentry_sdk
from dotenv import load_dotenv
from loguru import logger
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration

__version__ = "0.4.0"

# Load environment variables early so SENTRY_DSN is available for local/dev runs
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env")

_dsn = os.getenv("SENTRY_DSN")
if _dsn:
    sentry_sdk.init(
        dsn=_dsn,
        integrations=[
            FastApiIntegration(),
            SqlalchemyIntegration(),
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        traces_sample_rate=float(os.getenv("SENTRY_TRACES_SAMPLE_RATE", "0.0") or 0.0),
        environment=os.getenv("SENTRY_ENVIRONMENT") or os.getenv("ENV", "prod"),
        release=os.getenv("APP_VERSION") or __version__,
    )
else:
    logging.getLogger(__name__).info("Sentry DSN not set; Sentry disabled")

logger.debug("startup: signaldesk package loaded")
