import os
from dataclasses import dataclass
from typing import Any, Mapping

from dotenv import load_dotenv

load_dotenv()


class BaseConfig:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", SECRET_KEY)
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    UPLOAD_FOLDER = os.getenv("UPLOAD_FOLDER", "uploads")
    PUBLIC_BASE_URL = os.getenv("PUBLIC_BASE_URL", "http://localhost:5000")

    # Empty URL -> profiles are read from the local users table
    PROFILE_DIRECTORY_URL = os.getenv("PROFILE_DIRECTORY_URL", "")
    PROFILE_DIRECTORY_TIMEOUT = float(os.getenv("PROFILE_DIRECTORY_TIMEOUT", "3.0"))

    DEFAULT_PRIMARY_COLOR = os.getenv("DEFAULT_PRIMARY_COLOR", "#2563eb")
    DEFAULT_SECONDARY_COLOR = os.getenv("DEFAULT_SECONDARY_COLOR", "#2dd4da")
    DEFAULT_LOGO_URL = os.getenv("DEFAULT_LOGO_URL", "/static/images/wordmark-white.svg")
    DEFAULT_BACKGROUND_VIDEO_URL = os.getenv(
        "DEFAULT_BACKGROUND_VIDEO_URL",
        "/static/images/blue-gradient-background.mp4",
    )

    # Shared secret of the lead-capture and profile-directory webhooks
    WEBHOOK_TOKEN = os.getenv("WEBHOOK_TOKEN", "")

    DEFAULT_PER_PAGE = int(os.getenv("DEFAULT_PER_PAGE", "20"))
    MAX_PER_PAGE = int(os.getenv("MAX_PER_PAGE", "100"))


class DevelopmentConfig(BaseConfig):
    DEBUG = True
    LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")
    SQLALCHEMY_DATABASE_URI = os.getenv("DEV_DATABASE_URI", "sqlite:///landing_hub.db")


class TestingConfig(BaseConfig):
    TESTING = True
    SECRET_KEY = "test-secret"
    JWT_SECRET_KEY = "test-jwt-secret-with-enough-length-for-hs256"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    PROFILE_DIRECTORY_URL = ""
    PUBLIC_BASE_URL = "https://hub.test"
    WEBHOOK_TOKEN = "test-webhook-token"


class ProductionConfig(BaseConfig):
    DEBUG = False
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URI")


config_by_name = {
    "development": DevelopmentConfig,
    "testing": TestingConfig,
    "production": ProductionConfig,
}


@dataclass(frozen=True)
class HubSettings:
    """
    Immutable view of the settings the page services depend on.

    Built once per app from the Flask config and handed to services,
    so nothing below the API layer reads ``current_app.config`` directly.
    """

    public_base_url: str
    upload_folder: str
    profile_directory_url: str
    profile_directory_timeout: float
    default_primary_color: str
    default_secondary_color: str
    default_logo_url: str
    default_background_video_url: str
    default_per_page: int
    max_per_page: int

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> "HubSettings":
        return cls(
            public_base_url=config["PUBLIC_BASE_URL"].rstrip("/"),
            upload_folder=config["UPLOAD_FOLDER"],
            profile_directory_url=config.get("PROFILE_DIRECTORY_URL") or "",
            profile_directory_timeout=float(config["PROFILE_DIRECTORY_TIMEOUT"]),
            default_primary_color=config["DEFAULT_PRIMARY_COLOR"],
            default_secondary_color=config["DEFAULT_SECONDARY_COLOR"],
            default_logo_url=config["DEFAULT_LOGO_URL"],
            default_background_video_url=config["DEFAULT_BACKGROUND_VIDEO_URL"],
            default_per_page=int(config["DEFAULT_PER_PAGE"]),
            max_per_page=int(config["MAX_PER_PAGE"]),
        )
