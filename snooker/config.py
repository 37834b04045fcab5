from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

PROJECT_ROOT = Path(__file__).resolve().parent.parent
FRAMES_DIR = PROJECT_ROOT / "frames"

SCHEMA_VERSION = 1
ALLOWED_RED_COUNTS = (5, 10, 15)
DEFAULT_REDS = 15


class Settings(BaseSettings):
    """
    Runtime configuration, read from SNOOKER_* environment variables
    or a local .env file.
    """

    model_config = SettingsConfigDict(
        env_prefix="SNOOKER_",
        env_file=".env",
        extra="ignore",
    )

    database_url: str = Field(
        default=f"sqlite:///{PROJECT_ROOT / 'snooker.db'}",
        description="SQLAlchemy URL of the match history database",
    )

    log_level: str = "INFO"
    log_json: bool = True

    frames_dir: Path = Field(
        default=FRAMES_DIR,
        description="Directory for saved frame files",
    )


settings = Settings()
