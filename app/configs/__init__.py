from pydantic import Field
from pydantic_settings import SettingsConfigDict

from configs.fetch_config import FetchConfig
from configs.logging_config import LoggingConfig


class AppConfig(FetchConfig, LoggingConfig):
    PROJECT_NAME: str = Field(default="fetchkit")

    CURRENT_VERSION: str = Field(
        description="fetchkit version",
        default="0.1.0",
    )

    model_config = SettingsConfigDict(
        # read from dotenv format config file
        env_file=".env",
        env_file_encoding="utf-8",
        # ignore extra attributes
        extra="ignore",
    )


app_config: AppConfig = AppConfig()

__all__ = ["app_config"]
