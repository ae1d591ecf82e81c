"""Configuration management with Pydantic v2"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Store and logging settings, read from ``SQLBIND_*`` environment variables"""

    model_config = SettingsConfigDict(env_prefix="SQLBIND_", case_sensitive=False, extra="ignore")

    database_url: str = Field(
        default="sqlite:///sqlx_demo.db",
        description="SQLAlchemy URL of the store",
    )
    log_level: str = Field(
        default="INFO",
        pattern=r"^(DEBUG|INFO|WARNING|ERROR)$",
        description="Logging level",
    )
    echo: bool = Field(default=False, description="Log every statement through SQLAlchemy")
    reset_schema: bool = Field(
        default=True,
        description="Drop the demo tables before creating them",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value
