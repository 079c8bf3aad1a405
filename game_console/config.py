from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # App
    APP_NAME: str = "Game Console API"
    VERSION: str = "0.1.0"
    DEBUG: bool = True
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    CORS_ORIGINS: list[str] = ["*"]
    LOG_LEVEL: str = "INFO"

    # Storage: bos ise in-memory
    DATA_PATH: str = ""
    SEED_BUILTIN_GAMES: bool = True

    # Scheduler
    SCHEDULER_ENABLED: bool = True
    SCHEDULER_TICK_SECONDS: float = 30.0
    SCHEDULER_SHUTDOWN_GRACE_SECONDS: float = 5.0

    # Game runtime: bos ise local (in-process) runtime
    RUNTIME_URL: str = ""
    RUNTIME_API_KEY: str = ""
    RUNTIME_TIMEOUT_SECONDS: float = 10.0

    class Config:
        env_file = ".env"
        env_prefix = "GAME_CONSOLE_"
        extra = "ignore"


_settings: Settings | None = None


def get_settings() -> Settings:
    global _settings
    if not _settings:
        _settings = Settings()
    return _settings
