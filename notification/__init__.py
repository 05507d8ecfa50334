"""
Notification Module

Delivers queued kudos notifications over chat (Slack) and email (SendGrid).

Usage:
    from notification import NotificationDispatcher

    result = NotificationDispatcher(config).process_batch()
    print(result.processed, result.sent, result.failed)
"""

from notification.channels import (
    NotificationChannel,
    SlackChannel,
    SendGridEmailChannel,
    NotificationChannelFactory,
)

from notification.message_builder import (
    ChatPayload,
    EmailPayload,
    NotificationMessageBuilder,
    RenderContext,
)

from notification.stats import StatsAggregator

from notification.dispatcher import (
    NotificationDispatcher,
    DispatchResult,
)

__all__ = [
    # Channels
    'NotificationChannel',
    'SlackChannel',
    'SendGridEmailChannel',
    'NotificationChannelFactory',
    # Rendering
    'ChatPayload',
    'EmailPayload',
    'NotificationMessageBuilder',
    'RenderContext',
    # Stats
    'StatsAggregator',
    # Dispatch
    'NotificationDispatcher',
    'DispatchResult',
]
