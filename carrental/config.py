"""
Application configuration.

Values come from the environment (a local `.env` file is loaded first), so a
deployment only has to export variables; `create_app(config=...)` can still
override any key, and the tests start from `TestConfig`.
"""
import os
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = Path(__file__).resolve().parents[1]


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-change-me")
    APP_ENV = os.getenv("APP_ENV", "development")
    DATA_PATH = os.getenv("CARRENTAL_DATA_PATH", str(BASE_DIR / "data.pkl"))
    DISPLAY_TIMEZONE = os.getenv("DISPLAY_TIMEZONE", "Pacific/Auckland")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    TESTING = False


class TestConfig(Config):
    APP_ENV = "test"
    SECRET_KEY = "test"
    TESTING = True
    LOG_LEVEL = "WARNING"
