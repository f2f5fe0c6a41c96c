"""Utility modules."""

from .github_auth import GitHubAppAuth, generate_hmac_sha256_hex, verify_webhook_signature
from .logging import setup_logging

__all__ = [
    "GitHubAppAuth",
    "generate_hmac_sha256_hex",
    "setup_logging",
    "verify_webhook_signature",
]
