"""Errors raised inside the notification pipeline."""

from typing import Optional


class NotificationError(Exception):
    """Base class for notification pipeline errors."""
    pass


class ClaimError(NotificationError):
    """The atomic claim of pending notifications failed. Fatal to the run."""
    pass


class ContextNotFoundError(NotificationError):
    """A user, settings row or kudos event referenced by a notification is missing."""
    pass


class RenderError(NotificationError):
    """A payload could not be built for the notification."""
    pass


class UnsupportedNotificationTypeError(RenderError):
    def __init__(self, notification_type: str):
        super().__init__(f"Unsupported notification type: {notification_type}")
        self.notification_type = notification_type


class UnsupportedChannelError(NotificationError):
    def __init__(self, channel: str):
        super().__init__(f"Unsupported notification channel: {channel}")
        self.channel = channel


class MissingDestinationError(NotificationError):
    """The recipient has no address configured for the requested channel."""
    pass


class DeliveryError(NotificationError):
    """The provider rejected the message or could not be reached."""

    def __init__(
        self,
        message: str,
        provider: str,
        status_code: Optional[int] = None,
        error_code: Optional[str] = None,
    ):
        super().__init__(message)
        self.provider = provider
        self.status_code = status_code
        self.error_code = error_code
