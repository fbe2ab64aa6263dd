"""Application settings and configuration.

This module defines all configuration options for the Habersin application.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MIB = 1024 * 1024


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Habersin", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")

    # Security and authentication
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        default=60 * 24 * 7,
        alias="ACCESS_TOKEN_EXPIRE_MINUTES",
    )
    debug: bool = Field(default=False, alias="DEBUG")

    # Document store
    database_url: str = Field(default="sqlite:///./habersin.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Admission: status given to freshly admitted posts. "active" reproduces the
    # legacy path where posts skip the moderation queue.
    default_post_status: Literal["pending", "active"] = Field(
        default="pending",
        alias="DEFAULT_POST_STATUS",
    )
    anonymous_author_label: str = Field(default="Anonymous", alias="ANONYMOUS_AUTHOR_LABEL")
    unnamed_author_label: str = Field(default="Unnamed author", alias="UNNAMED_AUTHOR_LABEL")
    min_title_length: int = Field(default=5, alias="MIN_TITLE_LENGTH")
    min_content_length: int = Field(default=20, alias="MIN_CONTENT_LENGTH")
    max_images_per_post: int = Field(default=3, alias="MAX_IMAGES_PER_POST")

    # Image limits per call site
    submission_image_max_bytes: int = Field(default=10 * MIB, alias="SUBMISSION_IMAGE_MAX_BYTES")
    edit_image_max_bytes: int = Field(default=5 * MIB, alias="EDIT_IMAGE_MAX_BYTES")
    upload_image_max_bytes: int = Field(default=20 * MIB, alias="UPLOAD_IMAGE_MAX_BYTES")
    image_max_dimension: int = Field(default=5000, alias="IMAGE_MAX_DIMENSION")
    skin_ratio_threshold: float = Field(default=0.3, alias="SKIN_RATIO_THRESHOLD")

    # Moderation retry budget
    moderation_max_attempts: int = Field(default=3, alias="MODERATION_MAX_ATTEMPTS")
    moderation_retry_delay_seconds: float = Field(
        default=2.0,
        alias="MODERATION_RETRY_DELAY_SECONDS",
    )

    # Feeds and realtime
    page_size: int = Field(default=20, alias="PAGE_SIZE")
    notification_limit: int = Field(default=50, alias="NOTIFICATION_LIMIT")
    subscription_poll_interval_seconds: float = Field(
        default=1.0,
        alias="SUBSCRIPTION_POLL_INTERVAL_SECONDS",
    )

    # Blob storage
    blob_backend: Literal["local", "image_host"] = Field(default="local", alias="BLOB_BACKEND")
    blob_local_dir: str = Field(default="./media", alias="BLOB_LOCAL_DIR")
    blob_public_base_url: str = Field(
        default="http://localhost:8000/media",
        alias="BLOB_PUBLIC_BASE_URL",
    )
    image_host_endpoint: str = Field(
        default="https://api.imgur.com/3/image",
        alias="IMAGE_HOST_ENDPOINT",
    )
    image_host_client_id: str | None = Field(default=None, alias="IMAGE_HOST_CLIENT_ID")
    image_host_timeout_seconds: float = Field(default=30.0, alias="IMAGE_HOST_TIMEOUT_SECONDS")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(default=["*"], alias="CORS_ORIGINS")
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(default=["*"], alias="CORS_ALLOW_HEADERS")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
        populate_by_name=True,
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url


settings = Settings()
