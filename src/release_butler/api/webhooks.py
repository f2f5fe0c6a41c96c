"""GitHub webhook endpoints."""

import logging

from fastapi import APIRouter, Depends, Header, Request

from ..context import AppContext
from ..errors import LargeBodySize, MalformedBody, RequiredHeadersNotAvailable
from ..handlers import decode_event, dispatch
from ..utils.github_auth import verify_webhook_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/github", tags=["webhooks"])


def get_context(request: Request) -> AppContext:
    """Dependency returning the context built at application startup."""
    return request.app.state.context


async def read_body(request: Request, limit: int) -> bytes:
    """Read the whole body, refusing anything over `limit` bytes."""
    content_length = request.headers.get("content-length")
    if content_length and content_length.isdigit() and int(content_length) > limit:
        raise LargeBodySize(f"Body size is greater than {limit} bytes")

    body = bytearray()
    async for chunk in request.stream():
        body.extend(chunk)
        if len(body) > limit:
            raise LargeBodySize(f"Body size is greater than {limit} bytes")
    return bytes(body)


@router.post("/webhook/")
async def github_webhook(
    request: Request,
    context: AppContext = Depends(get_context),
    x_github_event: str | None = Header(None, alias="X-GitHub-Event"),
    x_hub_signature_256: str | None = Header(None, alias="X-Hub-Signature-256"),
) -> dict:
    """
    Main GitHub webhook endpoint.

    Handles: issues (labeled, edited), pull_request (closed)
    """
    if not x_github_event or not x_hub_signature_256:
        logger.error("Webhook request without `X-Hub-Signature-256` or `X-GitHub-Event`")
        raise RequiredHeadersNotAvailable()

    body = await read_body(request, context.webhook_size_limit)
    if not body:
        raise MalformedBody("Webhook body is empty")

    verify_webhook_signature(body, x_hub_signature_256, context.webhook_secret)

    event = decode_event(x_github_event, body)
    outcome = await dispatch(x_github_event, event, context)
    return {"status": outcome.value}
