#!/usr/bin/env python3
"""
Notification Channels

One sender per delivery channel, behind a common interface:
- SlackChannel posts Block Kit messages through chat.postMessage
- SendGridEmailChannel sends HTML mail through the v3 mail/send endpoint

A send either returns or raises DeliveryError. Channels never retry; the
queue row is marked failed and left for an operator.

Usage:
    from notification.channels import NotificationChannelFactory

    factory = NotificationChannelFactory(config)
    channel = factory.get_channel('chat')
    channel.send(destination, payload)
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional
import logging

import requests

from core.config_loader import AppConfig, SendGridConfig, SlackConfig
from notification.exceptions import DeliveryError
from notification.message_builder import ChannelPayload, ChatPayload, EmailPayload

logger = logging.getLogger(__name__)


def _mask_email(email: str) -> str:
    """
    Mask email address for safe logging (PII protection).

    Shows only domain, e.g., "***@example.com"
    """
    if '@' not in email:
        return "***"
    local, domain = email.rsplit('@', 1)
    return f"***@{domain}"


def _response_json(response: requests.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


class NotificationChannel(ABC):
    """
    Abstract base class for all notification channels.

    All notification channels must implement this interface so the
    dispatcher can use any of them interchangeably.
    """

    def __init__(self, timeout: float = 30.0, dry_run: bool = False):
        self.timeout = timeout
        self.dry_run = dry_run

    @property
    @abstractmethod
    def channel_type(self) -> str:
        """Return the channel type identifier."""
        pass

    @abstractmethod
    def send(self, recipient: str, payload: ChannelPayload) -> None:
        """
        Deliver a rendered payload.

        Args:
            recipient: Target recipient (email address, chat user or channel id)
            payload: Payload produced by NotificationMessageBuilder

        Raises:
            DeliveryError: the provider rejected the message or was unreachable
        """
        pass

    def validate_config(self) -> bool:
        """
        Validate that the channel is properly configured.

        Returns:
            True if configured correctly, False otherwise
        """
        return True

    def _post(self, provider: str, url: str, body: Dict[str, Any], headers: Dict[str, str]) -> requests.Response:
        try:
            return requests.post(url, json=body, headers=headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise DeliveryError(f"{provider} request failed: {e}", provider=provider) from e


class SlackChannel(NotificationChannel):
    """Chat notification channel via the Slack Web API."""

    def __init__(self, config: Optional[SlackConfig] = None, timeout: float = 30.0, dry_run: bool = False):
        super().__init__(timeout=timeout, dry_run=dry_run)
        self.config = config or SlackConfig()

    @property
    def channel_type(self) -> str:
        return 'chat'

    def validate_config(self) -> bool:
        return bool(self.config.bot_token)

    def send(self, recipient: str, payload: ChannelPayload) -> None:
        if not isinstance(payload, ChatPayload):
            raise DeliveryError(f"Slack cannot deliver {type(payload).__name__}", provider='slack')

        if self.dry_run:
            logger.info(f"[DRY RUN] Slack message to {recipient}: {payload.text} ({len(payload.blocks)} block(s))")
            return

        if not self.validate_config():
            raise DeliveryError("Slack not configured - SLACK_BOT_TOKEN not set", provider='slack')

        response = self._post(
            'slack',
            self.config.api_url,
            {'channel': recipient, 'text': payload.text, 'blocks': payload.blocks},
            {
                'Authorization': f"Bearer {self.config.bot_token}",
                'Content-Type': 'application/json; charset=utf-8',
            },
        )

        body = _response_json(response)
        # Slack reports most failures as HTTP 200 with ok=false
        if not response.ok or body.get('ok') is False:
            error_code = body.get('error') or str(response.status_code)
            logger.error(f"Slack API error: {response.status_code} - {error_code}")
            raise DeliveryError(
                f"Slack API error: {error_code}",
                provider='slack',
                status_code=response.status_code,
                error_code=error_code,
            )

        logger.info(f"Slack message sent to {recipient}")


class SendGridEmailChannel(NotificationChannel):
    """Email notification channel via SendGrid."""

    def __init__(self, config: Optional[SendGridConfig] = None, timeout: float = 30.0, dry_run: bool = False):
        super().__init__(timeout=timeout, dry_run=dry_run)
        self.config = config or SendGridConfig()

    @property
    def channel_type(self) -> str:
        return 'email'

    def validate_config(self) -> bool:
        return bool(self.config.api_key)

    def build_request(self, recipient: str, payload: EmailPayload) -> Dict[str, Any]:
        return {
            'personalizations': [{'to': [{'email': recipient}]}],
            'from': {'email': self.config.from_email, 'name': self.config.from_name},
            'subject': payload.subject,
            'content': [{'type': 'text/html', 'value': payload.html}],
        }

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        errors: List[Dict[str, Any]] = _response_json(response).get('errors') or []
        messages = [e.get('message') for e in errors if isinstance(e, dict) and e.get('message')]
        if messages:
            return ', '.join(messages)
        return response.reason or str(response.status_code)

    def send(self, recipient: str, payload: ChannelPayload) -> None:
        if not isinstance(payload, EmailPayload):
            raise DeliveryError(f"SendGrid cannot deliver {type(payload).__name__}", provider='sendgrid')

        if self.dry_run:
            logger.info(f"[DRY RUN] Email to {_mask_email(recipient)}: {payload.subject}")
            return

        if not self.validate_config():
            raise DeliveryError("SendGrid not configured - SENDGRID_API_KEY not set", provider='sendgrid')

        response = self._post(
            'sendgrid',
            self.config.api_url,
            self.build_request(recipient, payload),
            {
                'Authorization': f"Bearer {self.config.api_key}",
                'Content-Type': 'application/json',
            },
        )

        if not response.ok:
            message = self._error_message(response)
            logger.error(f"SendGrid API error for {_mask_email(recipient)}: {response.status_code} - {message}")
            raise DeliveryError(
                f"SendGrid API error: {message}",
                provider='sendgrid',
                status_code=response.status_code,
            )

        logger.info(f"Email sent to {_mask_email(recipient)}")


class NotificationChannelFactory:
    """
    Builds the sender for a notification channel from the app config.

    'chat' maps to Slack and 'email' to SendGrid; both share the dispatch
    timeout and dry-run settings.
    """

    def __init__(self, config: Optional[AppConfig] = None):
        self.config = config or AppConfig()

    def get_channel(self, channel_type: str) -> NotificationChannel:
        """
        Get a configured notification channel instance by type.

        Raises:
            ValueError: If channel type is neither 'chat' nor 'email'
        """
        dispatch = self.config.dispatch
        key = channel_type.lower()
        if key == 'chat':
            return SlackChannel(
                self.config.slack,
                timeout=dispatch.request_timeout_seconds,
                dry_run=dispatch.dry_run,
            )
        if key == 'email':
            return SendGridEmailChannel(
                self.config.sendgrid,
                timeout=dispatch.request_timeout_seconds,
                dry_run=dispatch.dry_run,
            )
        raise ValueError(f"Unknown channel type: {channel_type}. Available: chat, email")
