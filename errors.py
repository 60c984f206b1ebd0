"""Exceptions raised by the tracker and caught by the UI / API layers."""


class TrackerError(Exception):
    """Base class; the message is safe to show to the user."""


class ValidationError(TrackerError, ValueError):
    """Manual entry failed a required-field or amount check."""


class StoreError(TrackerError):
    """A database call failed or referenced a missing row."""


class AuthError(TrackerError):
    """Sign up / sign in was rejected."""
