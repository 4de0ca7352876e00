"""
Feed configuration and logging setup.
Settings come from a .env file (if present) and the process environment.
"""
import logging
import os
from typing import Dict, List, Optional

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

# Every one of these must be set before the dashboard attempts a live feed
REQUIRED_SETTINGS = [
    "INTAKE_FEED_PROJECT_ID",
    "INTAKE_FEED_DATABASE_PATH",
]

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class FeedSettings:
    """Connection parameters for the order/technician feed"""

    def __init__(self, values: Dict[str, Optional[str]], log_level: str = "INFO"):
        self.values = values
        self.log_level = log_level

    @property
    def missing(self) -> List[str]:
        return [name for name in REQUIRED_SETTINGS if not self.values.get(name)]

    @property
    def is_configured(self) -> bool:
        return not self.missing

    @property
    def project_id(self) -> Optional[str]:
        return self.values.get("INTAKE_FEED_PROJECT_ID")

    @property
    def database_path(self) -> Optional[str]:
        return self.values.get("INTAKE_FEED_DATABASE_PATH")


def load_settings(env_file: Optional[str] = None, environ: Optional[Dict[str, str]] = None) -> FeedSettings:
    """
    Build FeedSettings from the environment.

    When environ is given it is used as-is and no .env file is read, which is
    what tests rely on.
    """
    if environ is None:
        load_dotenv(env_file)
        environ = dict(os.environ)

    values = {name: (environ.get(name) or "").strip() or None for name in REQUIRED_SETTINGS}
    settings = FeedSettings(values, log_level=environ.get("INTAKE_LOG_LEVEL", "INFO"))

    if not settings.is_configured:
        logger.warning(
            "Feed is not configured. Missing settings: %s. Sample data will be used.",
            ", ".join(settings.missing),
        )
    return settings


def configure_logging(level: str = "INFO"):
    """Install a basic root handler; a no-op if one is already installed"""
    logging.basicConfig(level=getattr(logging, level.upper(), logging.INFO), format=LOG_FORMAT)
