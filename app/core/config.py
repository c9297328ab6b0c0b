# app/core/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional
import os

class Settings(BaseSettings):
    APP_TITLE: str = "rApp Manager Back End"
    API_PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    GOOGLE_CLOUD_PROJECT_ID: Optional[str] = None
    SERVICE_ACCOUNT_KEY_PATH: Optional[str] = None

    # BigQuery Settings
    BQ_DATASET_LOCATION: str = "US"
    BQ_JOB_LOCATION: str = "us"
    BQ_JOB_TIMEOUT_SECONDS: float = 600.0
    BQ_PAGE_SIZE: int = 100

    model_config = SettingsConfigDict(env_file=".env", extra='ignore')

settings = Settings()

# Resolve a relative key path against the working directory
if settings.SERVICE_ACCOUNT_KEY_PATH and not os.path.isabs(settings.SERVICE_ACCOUNT_KEY_PATH):
    settings.SERVICE_ACCOUNT_KEY_PATH = os.path.abspath(settings.SERVICE_ACCOUNT_KEY_PATH)
