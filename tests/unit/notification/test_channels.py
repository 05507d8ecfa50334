#!/usr/bin/env python3
"""
Tests for the notification channel senders.

Tests cover:
1. Slack request shape and error handling (HTTP and ok=false)
2. SendGrid request shape and error aggregation
3. Transport failures, missing credentials and dry-run mode
4. Channel factory construction

Usage:
    python -m pytest tests/unit/notification/test_channels.py -v
"""

import unittest
from unittest.mock import Mock, patch

import requests

from core.config_loader import AppConfig, SendGridConfig, SlackConfig
from notification.channels import (
    NotificationChannelFactory,
    SendGridEmailChannel,
    SlackChannel,
    _mask_email,
)
from notification.exceptions import DeliveryError
from notification.message_builder import ChatPayload, EmailPayload


CHAT_PAYLOAD = ChatPayload(
    text="You've received kudos from Bob!",
    blocks=[{'type': 'section', 'text': {'type': 'mrkdwn', 'text': 'Hey <@U1>!'}}],
)
EMAIL_PAYLOAD = EmailPayload(subject="You received kudos from Bob!", html="<p>Nice</p>")


def _response(status_code=200, body=None, reason="OK"):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.reason = reason
    if body is None:
        response.json.side_effect = ValueError("no json")
    else:
        response.json.return_value = body
    return response


class TestSlackChannel(unittest.TestCase):

    def setUp(self):
        self.channel = SlackChannel(SlackConfig(bot_token='xoxb-123'), timeout=5)

    def test_channel_type(self):
        self.assertEqual(self.channel.channel_type, 'chat')

    @patch('notification.channels.requests.post')
    def test_send_success(self, mock_post):
        mock_post.return_value = _response(body={'ok': True, 'ts': '1700000000.000100'})

        self.channel.send('D42', CHAT_PAYLOAD)

        mock_post.assert_called_once()
        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://slack.com/api/chat.postMessage')
        self.assertEqual(kwargs['json'], {
            'channel': 'D42',
            'text': CHAT_PAYLOAD.text,
            'blocks': CHAT_PAYLOAD.blocks,
        })
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer xoxb-123')
        self.assertEqual(kwargs['timeout'], 5)

    @patch('notification.channels.requests.post')
    def test_ok_false_is_a_failure(self, mock_post):
        mock_post.return_value = _response(body={'ok': False, 'error': 'channel_not_found'})

        with self.assertRaises(DeliveryError) as ctx:
            self.channel.send('D42', CHAT_PAYLOAD)

        self.assertEqual(str(ctx.exception), 'Slack API error: channel_not_found')
        self.assertEqual(ctx.exception.provider, 'slack')
        self.assertEqual(ctx.exception.error_code, 'channel_not_found')

    @patch('notification.channels.requests.post')
    def test_http_error_is_a_failure(self, mock_post):
        mock_post.return_value = _response(status_code=500, reason="Internal Server Error")

        with self.assertRaises(DeliveryError) as ctx:
            self.channel.send('D42', CHAT_PAYLOAD)

        self.assertEqual(str(ctx.exception), 'Slack API error: 500')
        self.assertEqual(ctx.exception.status_code, 500)

    @patch('notification.channels.requests.post')
    def test_transport_error_is_wrapped(self, mock_post):
        mock_post.side_effect = requests.ConnectionError("connection refused")

        with self.assertRaises(DeliveryError) as ctx:
            self.channel.send('D42', CHAT_PAYLOAD)

        self.assertIn('connection refused', str(ctx.exception))

    @patch('notification.channels.requests.post')
    def test_missing_token_fails_without_request(self, mock_post):
        channel = SlackChannel(SlackConfig(bot_token=None))

        self.assertFalse(channel.validate_config())
        with self.assertRaises(DeliveryError):
            channel.send('D42', CHAT_PAYLOAD)
        mock_post.assert_not_called()

    @patch('notification.channels.requests.post')
    def test_dry_run_does_not_call_provider(self, mock_post):
        channel = SlackChannel(SlackConfig(bot_token=None), dry_run=True)

        channel.send('D42', CHAT_PAYLOAD)

        mock_post.assert_not_called()

    def test_rejects_email_payload(self):
        with self.assertRaises(DeliveryError):
            self.channel.send('D42', EMAIL_PAYLOAD)


class TestSendGridEmailChannel(unittest.TestCase):

    def setUp(self):
        self.channel = SendGridEmailChannel(SendGridConfig(api_key='SG.key'))

    def test_channel_type(self):
        self.assertEqual(self.channel.channel_type, 'email')

    @patch('notification.channels.requests.post')
    def test_send_success(self, mock_post):
        mock_post.return_value = _response(status_code=202, reason="Accepted")

        self.channel.send('ann@example.com', EMAIL_PAYLOAD)

        args, kwargs = mock_post.call_args
        self.assertEqual(args[0], 'https://api.sendgrid.com/v3/mail/send')
        self.assertEqual(kwargs['headers']['Authorization'], 'Bearer SG.key')
        body = kwargs['json']
        self.assertEqual(body['personalizations'], [{'to': [{'email': 'ann@example.com'}]}])
        self.assertEqual(body['from'], {'email': 'no-reply@kudos.app', 'name': 'Kudos'})
        self.assertEqual(body['subject'], EMAIL_PAYLOAD.subject)
        self.assertEqual(body['content'], [{'type': 'text/html', 'value': '<p>Nice</p>'}])

    @patch('notification.channels.requests.post')
    def test_error_messages_are_joined(self, mock_post):
        mock_post.return_value = _response(status_code=400, reason="Bad Request", body={
            'errors': [
                {'message': 'The from address does not match a verified Sender Identity.'},
                {'message': 'Invalid email.'},
            ]
        })

        with self.assertRaises(DeliveryError) as ctx:
            self.channel.send('ann@example.com', EMAIL_PAYLOAD)

        self.assertEqual(
            str(ctx.exception),
            'SendGrid API error: The from address does not match a verified Sender Identity., Invalid email.'
        )
        self.assertEqual(ctx.exception.status_code, 400)

    @patch('notification.channels.requests.post')
    def test_error_without_body_uses_reason(self, mock_post):
        mock_post.return_value = _response(status_code=401, reason="Unauthorized")

        with self.assertRaises(DeliveryError) as ctx:
            self.channel.send('ann@example.com', EMAIL_PAYLOAD)

        self.assertEqual(str(ctx.exception), 'SendGrid API error: Unauthorized')

    @patch('notification.channels.requests.post')
    def test_timeout_is_wrapped(self, mock_post):
        mock_post.side_effect = requests.Timeout("read timed out")

        with self.assertRaises(DeliveryError) as ctx:
            self.channel.send('ann@example.com', EMAIL_PAYLOAD)

        self.assertEqual(ctx.exception.provider, 'sendgrid')

    @patch('notification.channels.requests.post')
    def test_missing_api_key_fails_without_request(self, mock_post):
        channel = SendGridEmailChannel(SendGridConfig(api_key=None))

        with self.assertRaises(DeliveryError):
            channel.send('ann@example.com', EMAIL_PAYLOAD)
        mock_post.assert_not_called()

    def test_mask_email(self):
        self.assertEqual(_mask_email('ann@example.com'), '***@example.com')
        self.assertEqual(_mask_email('not-an-email'), '***')


class TestNotificationChannelFactory(unittest.TestCase):

    def setUp(self):
        self.config = AppConfig(
            slack={'bot_token': 'xoxb-1'},
            sendgrid={'api_key': 'SG.1'},
            dispatch={'request_timeout_seconds': 12, 'dry_run': True},
        )

    def test_builds_configured_channels(self):
        factory = NotificationChannelFactory(self.config)

        chat = factory.get_channel('chat')
        email = factory.get_channel('EMAIL')

        self.assertIsInstance(chat, SlackChannel)
        self.assertEqual(chat.config.bot_token, 'xoxb-1')
        self.assertEqual(chat.timeout, 12)
        self.assertTrue(chat.dry_run)
        self.assertIsInstance(email, SendGridEmailChannel)
        self.assertEqual(email.config.api_key, 'SG.1')

    def test_unknown_channel(self):
        with self.assertRaises(ValueError):
            NotificationChannelFactory(self.config).get_channel('sms')

    def test_channel_type_names(self):
        factory = NotificationChannelFactory(self.config)

        self.assertEqual(factory.get_channel('chat').channel_type, 'chat')
        self.assertEqual(factory.get_channel('email').channel_type, 'email')


if __name__ == '__main__':
    unittest.main()
