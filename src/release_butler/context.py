"""Dependencies shared by every webhook request."""

from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from dataclasses import dataclass

from .config import Settings
from .services.github_client import GitHubClient
from .services.provider import SourceControlProvider
from .utils.github_auth import GitHubAppAuth

ProviderFactory = Callable[[int], AbstractAsyncContextManager[SourceControlProvider]]


@dataclass(frozen=True)
class AppContext:
    """
    Explicitly constructed request dependencies.

    `provider_for(installation_id)` opens a provider session scoped to one
    installation; tests pass a factory yielding an in-memory provider.
    """

    webhook_secret: str
    provider_for: ProviderFactory
    webhook_size_limit: int = 25_000_000
    release_config_path: str = ".github/release-butler.toml"
    app_slug: str = "release-butler"

    @classmethod
    def from_settings(cls, settings: Settings) -> "AppContext":
        auth = GitHubAppAuth(
            settings.github_app_id,
            settings.github_app_private_key,
            settings.github_api_url,
        )
        return cls(
            webhook_secret=settings.github_webhook_secret,
            provider_for=lambda installation_id: GitHubClient(auth, installation_id),
            webhook_size_limit=settings.webhook_size_limit,
            release_config_path=settings.release_config_path,
            app_slug=settings.github_app_slug,
        )
