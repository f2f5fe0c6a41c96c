"""Results of handling a webhook delivery."""

from enum import Enum


class Outcome(str, Enum):
    """
    What a handler did with a delivery.

    Every outcome is answered with 200; hard failures raise `WebhookError`
    instead of returning.
    """

    # Nothing to do for this delivery
    IGNORED = "ignored"
    # Request rejected with an explanatory comment (bad title, unauthorized, ...)
    COMMENTED = "commented"
    # Release branch pushed and PR open
    PUBLISHED = "published"
    # Tag created, and the GitHub Release if configured
    RELEASED = "released"
    # A provider call failed; details are in the logs
    FAILED = "failed"
