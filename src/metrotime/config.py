"""Runtime configuration for the WMATA client and timetable service.

Settings are read from environment variables prefixed with ``WMATA_``
(``WMATA_API_KEY``, ``WMATA_TIMEOUT_SECONDS``, ...) or passed directly:

    settings = WMATASettings(api_key="...")
    timetable = WMATATimetable(settings)
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

WMATA_ROOT_URL = "https://api.wmata.com"

# Minimum similarity a fuzzy station match must reach
DEFAULT_FUZZY_THRESHOLD = 0.75


class WMATASettings(BaseSettings):
    """Connection and matching settings.

    Environment variables prefixed with WMATA_.
    """

    model_config = SettingsConfigDict(env_prefix="WMATA_", frozen=True)

    api_key: str
    root_url: str = WMATA_ROOT_URL
    timeout_seconds: float = Field(default=10.0, gt=0)
    fuzzy_threshold: float = Field(default=DEFAULT_FUZZY_THRESHOLD, ge=0.0, le=1.0)
