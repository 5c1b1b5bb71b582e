from loguru import logger
from pydantic import BaseModel

from app.shared.config import config

REQUIRED_CONFIG_KEYS = ("LIVEKIT_WS_URL", "LIVEKIT_API_KEY", "LIVEKIT_API_SECRET")


def _http_url(ws_url: str | None) -> str | None:
    if not ws_url:
        return None
    return ws_url.replace("wss://", "https://", 1).replace("ws://", "http://", 1)


class AppEnvironConfig(BaseModel):
    DEBUG: bool = (config.get("DEBUG") or "false").strip().lower() == "true"

    API_HOST: str = (config.get("API_HOST") or "0.0.0.0").strip()
    API_PORT: int = int((config.get("API_PORT") or config.get("PORT") or "").strip() or 3000)
    API_WORKERS: int = int((config.get("API_WORKERS") or "").strip() or 1)
    API_CORS_ORIGINS: list[str] = [
        x.strip() for x in (config.get("API_CORS_ORIGINS") or "*").split(",") if x.strip()
    ]

    # LiveKit configuration
    LIVEKIT_WS_URL: str | None = (config.get("LIVEKIT_WS_URL") or "").strip() or None
    LIVEKIT_API_KEY: str | None = (config.get("LIVEKIT_API_KEY") or "").strip() or None
    LIVEKIT_API_SECRET: str | None = (config.get("LIVEKIT_API_SECRET") or "").strip() or None

    # Session credentials are signed with the LiveKit secret unless overridden
    SESSION_SECRET: str | None = (config.get("SESSION_SECRET") or "").strip() or None

    # Room configuration
    ROOM_EMPTY_TIMEOUT: int = int((config.get("ROOM_EMPTY_TIMEOUT") or "").strip() or 300)

    # Participant defaults
    AVATAR_BASE_URL: str = (
        (config.get("AVATAR_BASE_URL") or "").strip() or "https://api.multiavatar.com"
    )

    LOGFIRE_ENABLE: bool = (config.get("LOGFIRE_ENABLE") or "false").strip().lower() == "true"
    LOGFIRE_TOKEN: str | None = (config.get("LOGFIRE_TOKEN") or "").strip() or None

    @property
    def LIVEKIT_HTTP_URL(self) -> str | None:
        return _http_url(self.LIVEKIT_WS_URL)

    @property
    def session_secret(self) -> str | None:
        return self.SESSION_SECRET or self.LIVEKIT_API_SECRET


_app_environ_config = AppEnvironConfig()


def get_app_environ_config() -> AppEnvironConfig:
    return _app_environ_config


def ensure_required_config() -> None:
    """Exit the process if any required configuration key is missing."""
    cfg = get_app_environ_config()
    missing = [key for key in REQUIRED_CONFIG_KEYS if not getattr(cfg, key)]
    if missing:
        for key in missing:
            logger.error("Environment variable {} is required", key)
        raise SystemExit(1)
