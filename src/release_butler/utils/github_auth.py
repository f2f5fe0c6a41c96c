"""GitHub App authentication utilities."""

import hashlib
import hmac
import logging
import time

import httpx
import jwt

from ..errors import InvalidSignature, MalformedBody, RequiredHeadersNotAvailable

logger = logging.getLogger(__name__)

SIGNATURE_PREFIX = "sha256="


def generate_hmac_sha256_hex(body: bytes, key: bytes) -> str:
    """Hex-encoded HMAC-SHA256 of the body."""
    return hmac.new(key, body, hashlib.sha256).hexdigest()


def verify_webhook_signature(body: bytes, signature: str | None, secret: str) -> None:
    """
    Verify a GitHub webhook signature.

    `signature` is the raw `X-Hub-Signature-256` header value. Raises
    instead of returning a flag so each failure keeps its own status code.
    """
    if not signature or not signature.startswith(SIGNATURE_PREFIX):
        raise RequiredHeadersNotAvailable()

    received = signature[len(SIGNATURE_PREFIX):].strip().lower()
    try:
        bytes.fromhex(received)
    except ValueError as e:
        raise MalformedBody("`X-Hub-Signature-256` must be hex encoded") from e

    expected = generate_hmac_sha256_hex(body, secret.encode())
    if not hmac.compare_digest(expected, received):
        raise InvalidSignature(
            "This is not a valid webhook event sent by GitHub"
        )


class GitHubAppAuth:
    """Mints app JWTs and exchanges them for installation tokens."""

    # Installation tokens last 1 hour
    TOKEN_TTL_SECONDS = 3500

    def __init__(self, app_id: int, private_key: str, api_url: str = "https://api.github.com"):
        self.app_id = app_id
        self.private_key = private_key
        self.api_url = api_url
        self._token_cache: dict[int, tuple[str, float]] = {}

    def generate_app_jwt(self) -> str:
        """Generate a JWT for GitHub App authentication."""
        now = int(time.time())
        payload = {
            "iat": now - 60,  # Issued at (60 seconds ago for clock skew)
            "exp": now + (10 * 60),  # Expires in 10 minutes
            "iss": str(self.app_id),
        }
        return jwt.encode(payload, self.private_key, algorithm="RS256")

    async def get_installation_token(self, installation_id: int) -> str:
        """Get an installation access token (cached)."""
        if installation_id in self._token_cache:
            token, expires_at = self._token_cache[installation_id]
            if time.time() < expires_at - 60:  # 60 second buffer
                return token

        app_jwt = self.generate_app_jwt()

        async with httpx.AsyncClient(base_url=self.api_url) as client:
            response = await client.post(
                f"/app/installations/{installation_id}/access_tokens",
                headers={
                    "Authorization": f"Bearer {app_jwt}",
                    "Accept": "application/vnd.github.v3+json",
                },
            )
            response.raise_for_status()
            data = response.json()

        token = data["token"]
        self._token_cache[installation_id] = (token, time.time() + self.TOKEN_TTL_SECONDS)
        logger.debug(f"Minted installation token for installation {installation_id}")
        return token
