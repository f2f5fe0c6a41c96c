"""Application configuration using Pydantic settings."""

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # GitHub App
    github_app_id: int = Field(..., description="GitHub App ID")
    github_app_private_key: str = Field(
        ...,
        description="GitHub App private key (PEM format)",
    )
    github_app_slug: str = Field(
        "release-butler",
        description="App slug, used to find issues opened by the app bot",
    )
    github_webhook_secret: str = Field(
        ...,
        description="Webhook secret for signature verification",
    )
    github_api_url: str = Field("https://api.github.com")

    # Webhook
    webhook_size_limit: int = Field(
        25_000_000,
        description="Reject webhook bodies larger than 25MB",
    )

    # Repository configuration
    release_config_path: str = Field(
        ".github/release-butler.toml",
        description="Path of the release configuration inside each repository",
    )

    # Server
    host: str = Field("0.0.0.0")
    port: int = Field(8000)
    log_level: str = Field("INFO")

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}
