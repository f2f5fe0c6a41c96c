"""Webhook event handlers for the release workflow."""

from .dispatcher import decode_event, dispatch, repository_identity
from .issues import handle_issue_event
from .outcome import Outcome
from .pull_requests import handle_pull_request_event

__all__ = [
    "Outcome",
    "decode_event",
    "dispatch",
    "handle_issue_event",
    "handle_pull_request_event",
    "repository_identity",
]
