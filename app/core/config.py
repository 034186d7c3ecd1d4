from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # ── Feed ──────────────────────────────────────────────────
    MAX_MESSAGES: int = 50
    INTERVAL_SEC: float = 15.0

    # ── Streaming ─────────────────────────────────────────────
    SSE_QUEUE_MAXSIZE: int = 100
    SSE_HEARTBEAT_SEC: float = 15.0

    # ── API ───────────────────────────────────────────────────
    HOST: str = "0.0.0.0"
    PORT: int = 7070
    LOG_LEVEL: str = "INFO"
    CORS_ORIGINS: str = "*"

    def cors_origins(self) -> list[str]:
        """Comma-separated CORS_ORIGINS as a list; '*' allows any origin."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]


settings = Settings()
