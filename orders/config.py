import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

from auth.config import JwtSettings

# Always the .env next to this service, not the one at the repo root
BASE_DIR = Path(__file__).resolve().parent
ENV_PATH = BASE_DIR / ".env"

# SQLite file next to this service unless DATABASE_URL points elsewhere
DEFAULT_DB_FILE = "orders.db"


def default_database_url(db_file: str = DEFAULT_DB_FILE) -> str:
    return f"sqlite:///{(BASE_DIR / db_file).as_posix()}"


DEFAULT_DATABASE_URL = default_database_url()


def _env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


@dataclass(frozen=True)
class Settings:
    jwt: JwtSettings = field(default_factory=JwtSettings)
    database_url: str = DEFAULT_DATABASE_URL
    seed_demo_data: bool = False
    log_level: str = "INFO"
    log_file: str | None = None
    event_workers: int = 2


def load_settings(env_path: Path = ENV_PATH) -> Settings:
    load_dotenv(dotenv_path=env_path, override=True)
    return Settings(
        jwt=JwtSettings.from_env(),
        database_url=os.getenv("DATABASE_URL") or default_database_url(os.getenv("DB_FILE", DEFAULT_DB_FILE)),
        seed_demo_data=_env_flag("SEED_DEMO_DATA", True),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        log_file=os.getenv("LOG_FILE") or None,
        event_workers=int(os.getenv("EVENT_WORKERS", "2")),
    )
