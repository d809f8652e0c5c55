"""
Configuration loader for the offer landing service
"""

import os
import yaml
from pathlib import Path
from typing import Any, Dict, Literal, Mapping, Optional
from pydantic import BaseModel, Field, ValidationError
import logging

logger = logging.getLogger(__name__)

# Environment variable -> settings field
_ENV_FIELDS = {
    "HUBSPOT_ACCESS_TOKEN": "hubspot_access_token",
    "HUBSPOT_API_BASE_URL": "hubspot_api_base_url",
    "INTEGRATIONS_MODE": "integrations_mode",
    "LOOKUP_DEADLINE_SECONDS": "lookup_deadline_seconds",
    "ANALYTICS_SITE": "analytics_site",
    "ANALYTICS_ENABLED": "analytics_enabled",
    "GA_MEASUREMENT_ID": "ga_measurement_id",
    "GA_API_SECRET": "ga_api_secret",
}


class LandingSettings(BaseModel):
    """Runtime settings for the landing API and page loader"""

    hubspot_access_token: Optional[str] = None
    hubspot_api_base_url: str = "https://api.hubapi.com"
    integrations_mode: Literal["real", "mock"] = "real"
    lookup_deadline_seconds: float = Field(default=15.0, gt=0.0, le=120.0)
    analytics_site: str = "medellin"
    analytics_enabled: bool = False
    ga_measurement_id: str = "G-WXCCTKWS5T"
    ga_api_secret: Optional[str] = None

    @property
    def crm_configured(self) -> bool:
        return bool((self.hubspot_access_token or "").strip())


def _settings_from_env(env: Mapping[str, str]) -> Dict[str, Any]:
    values: Dict[str, Any] = {}
    for var, field_name in _ENV_FIELDS.items():
        raw = env.get(var)
        if raw is None or not raw.strip():
            continue
        raw = raw.strip()
        if field_name == "integrations_mode":
            raw = raw.lower()
        values[field_name] = raw
    return values


def load_landing_settings(
    config_path: Optional[Path] = None,
    env: Optional[Mapping[str, str]] = None,
) -> LandingSettings:
    """
    Load and validate landing settings

    YAML values from config/landing_config.yml (when present) are applied
    first, then environment variables override them.

    Args:
        config_path: Path to config file. Defaults to config/landing_config.yml
        env: Environment mapping. Defaults to os.environ

    Returns:
        Validated LandingSettings
    """
    if config_path is None:
        config_path = Path(__file__).parent.parent.parent / "config" / "landing_config.yml"
    if env is None:
        env = os.environ

    data: Dict[str, Any] = {}
    if config_path.exists():
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        logger.info("Loaded landing config file %s", config_path)

    data.update(_settings_from_env(env))

    try:
        return LandingSettings(**data)
    except ValidationError as e:
        logger.error("Landing config validation failed: %s", e)
        raise
