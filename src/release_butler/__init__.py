"""GitHub App that turns labeled issues into package releases."""

__version__ = "0.1.0"
