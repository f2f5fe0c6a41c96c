"""Decode verified webhook bodies and route them to release handlers."""

import logging

import httpx
from pydantic import ValidationError

from ..context import AppContext
from ..errors import MalformedBody, SerializationFailed, UnsupportedEvent
from ..schemas.github_webhooks import (
    EVENT_MODELS,
    GenericEvent,
    RepositoryIdentity,
    WebhookEvent,
)
from .issues import handle_issue_event
from .outcome import Outcome
from .pull_requests import handle_pull_request_event

logger = logging.getLogger(__name__)


def decode_event(kind: str, body: bytes) -> WebhookEvent:
    """Decode the body using the event kind header as discriminator."""
    model = EVENT_MODELS.get(kind, GenericEvent)
    try:
        return model.model_validate_json(body)
    except ValidationError as e:
        logger.error(f"Failed to deserialize `{kind}` event: {e}")
        raise SerializationFailed() from e


def repository_identity(event: WebhookEvent) -> RepositoryIdentity:
    if event.repository is None:
        logger.error("The payload doesn't contain repository information")
        raise MalformedBody("Repository Information is required")

    identity = RepositoryIdentity.from_full_name(event.repository.full_name)
    if identity is None:
        raise MalformedBody(
            f"Repository full name `{event.repository.full_name}` is not `owner/name`"
        )
    return identity


async def dispatch(kind: str, event: WebhookEvent, context: AppContext) -> Outcome:
    """Run the handler for (event kind, action); anything else is unsupported."""
    repo = repository_identity(event)

    match (kind, event.action):
        case ("issues", "labeled" | "edited"):
            handler = handle_issue_event
        case ("pull_request", "closed"):
            handler = handle_pull_request_event
        case _:
            logger.info(f"Got an unsupported event `{kind}` (action={event.action}) for {repo}")
            raise UnsupportedEvent()

    if event.installation is None:
        raise MalformedBody("Installation id is required")

    logger.info(f"Handling `{kind}.{event.action}` for {repo}")
    try:
        async with context.provider_for(event.installation.id) as gh:
            return await handler(repo, event, gh, context)
    except httpx.HTTPError as e:
        # Installation token exchange failed; retrying the delivery won't help
        logger.error(
            f"Failed to authenticate installation {event.installation.id} for {repo}: {e}"
        )
        return Outcome.FAILED
