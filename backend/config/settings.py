# Environment-driven settings for the notification dispatch service.
# Values are read once per call to load_settings(); a .env file in the
# working directory is honored via python-dotenv.

import os

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field

from models.notification import RateWindowConfig
from notifications.errors import ConfigurationError

load_dotenv()

DEFAULT_FROM_ADDRESS = "noreply@tidy-prioritize.app"
DEFAULT_FROM_NAME = "Tidy Prioritize"
RESEND_API_URL = "https://api.resend.com/emails"


class NotificationSettings(BaseModel):
    model_config = ConfigDict(frozen=True)

    resend_api_key: str | None = None
    from_address: str = DEFAULT_FROM_ADDRESS
    from_name: str = DEFAULT_FROM_NAME
    api_url: str = RESEND_API_URL
    timeout_seconds: float = Field(10.0, gt=0)
    rate_limits: RateWindowConfig = Field(default_factory=RateWindowConfig)
    log_dir: str | None = None

    def require_api_key(self) -> str:
        """Return the provider API key or fail loudly."""
        if not self.resend_api_key:
            raise ConfigurationError("RESEND_API_KEY is not configured")
        return self.resend_api_key


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def load_settings() -> NotificationSettings:
    """Build settings from environment variables."""
    max_per_hour = _env_int("EMAIL_MAX_PER_HOUR", 10)
    max_per_day = _env_int("EMAIL_MAX_PER_DAY", 50)
    if max_per_hour <= 0 or max_per_day <= 0:
        raise ConfigurationError(
            "EMAIL_MAX_PER_HOUR and EMAIL_MAX_PER_DAY must be positive"
        )
    timeout_seconds = _env_float("EMAIL_TIMEOUT_SECONDS", 10.0)
    if timeout_seconds <= 0:
        raise ConfigurationError("EMAIL_TIMEOUT_SECONDS must be positive")

    return NotificationSettings(
        resend_api_key=os.getenv("RESEND_API_KEY") or None,
        from_address=os.getenv("EMAIL_FROM") or DEFAULT_FROM_ADDRESS,
        from_name=os.getenv("EMAIL_FROM_NAME") or DEFAULT_FROM_NAME,
        api_url=os.getenv("RESEND_API_URL") or RESEND_API_URL,
        timeout_seconds=timeout_seconds,
        rate_limits=RateWindowConfig(
            max_per_hour=max_per_hour,
            max_per_day=max_per_day,
            count_failed_attempts=_env_bool("EMAIL_COUNT_FAILED_ATTEMPTS", True),
        ),
        log_dir=os.getenv("NOTIFICATION_LOG_DIR") or None,
    )
