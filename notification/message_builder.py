"""
Rendering of queued notifications into channel-native payloads.

Every (type, channel) pair has one pure render function registered below.
Nothing in this module touches the database or the network: the dispatcher
loads the user, settings, kudos event and weekly stats first and hands them
over in a RenderContext.
"""

import html
import urllib.parse
from typing import Any, Callable, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict

from notification.exceptions import (
    RenderError,
    UnsupportedChannelError,
    UnsupportedNotificationTypeError,
)
from notification.schemas import (
    KudosContext,
    NotificationChannelType,
    NotificationRecord,
    NotificationType,
    SettingsContext,
    UserContext,
    WeeklyStats,
)
from notification.stats import NO_TOP_CATEGORY


class ChatPayload(BaseModel):
    """Block Kit message. `text` is the notification fallback shown by clients."""
    text: str
    blocks: List[Dict[str, Any]]


class EmailPayload(BaseModel):
    subject: str
    html: str


ChannelPayload = Union[ChatPayload, EmailPayload]


class RenderContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    notification: NotificationRecord
    user: UserContext
    settings: SettingsContext
    kudos: Optional[KudosContext] = None
    stats: Optional[WeeklyStats] = None
    app_url: str

    def link(self, path: str = "") -> str:
        return f"{self.app_url.rstrip('/')}{path}"


def join_names(names: List[str]) -> str:
    """Join names for prose: "A", "A and B", "A, B and C"."""
    if not names:
        return ""
    if len(names) == 1:
        return names[0]
    return f"{', '.join(names[:-1])} and {names[-1]}"


def _escape_mrkdwn(text: str) -> str:
    """Escape the three characters Slack treats as control sequences."""
    return text.replace('&', '&amp;').replace('<', '&lt;').replace('>', '&gt;')


def _is_http_url(url: Optional[str]) -> bool:
    if not url:
        return False
    try:
        return urllib.parse.urlparse(url).scheme in ('http', 'https')
    except ValueError:
        return False


def _sanitize_url(url: Optional[str]) -> Optional[str]:
    """Return an attribute-safe http(s) URL, or None."""
    if not _is_http_url(url):
        return None
    return html.escape(url, quote=True)


def parse_notification_type(value: str) -> NotificationType:
    try:
        return NotificationType(value)
    except ValueError:
        raise UnsupportedNotificationTypeError(value) from None


def parse_channel(value: str) -> NotificationChannelType:
    try:
        return NotificationChannelType(value)
    except ValueError:
        raise UnsupportedChannelError(value) from None


def _require_kudos(ctx: RenderContext) -> KudosContext:
    if ctx.kudos is None:
        raise RenderError(
            f"Notification {ctx.notification.id} of type {ctx.notification.type} has no kudos data"
        )
    return ctx.kudos


def _require_stats(ctx: RenderContext) -> WeeklyStats:
    if ctx.stats is None:
        raise RenderError(f"Weekly stats were not loaded for notification {ctx.notification.id}")
    return ctx.stats


# ============ Chat blocks ============

def _section(text: str) -> Dict[str, Any]:
    return {'type': 'section', 'text': {'type': 'mrkdwn', 'text': text}}


def _fields(*texts: str) -> Dict[str, Any]:
    return {'type': 'section', 'fields': [{'type': 'mrkdwn', 'text': t} for t in texts]}


def _mention(ctx: RenderContext) -> str:
    return f"<@{ctx.settings.chat_user_id}>"


def _kudos_detail_blocks(kudos: KudosContext) -> List[Dict[str, Any]]:
    blocks = [_fields(f"*Category:*\n{_escape_mrkdwn(kudos.category_name)}")]
    if kudos.message:
        blocks.append(_section(f"*Message:*\n{_escape_mrkdwn(kudos.message)}"))
    if _is_http_url(kudos.gif_url):
        blocks.append({'type': 'image', 'image_url': kudos.gif_url, 'alt_text': 'Kudos GIF'})
    return blocks


def render_kudos_received_chat(ctx: RenderContext) -> ChatPayload:
    kudos = _require_kudos(ctx)
    giver = _escape_mrkdwn(kudos.giver.name)
    greeting = f"Hey {_mention(ctx)}! You've received kudos from *{giver}*! :tada:"
    return ChatPayload(
        text=f"You've received kudos from {kudos.giver.name}!",
        blocks=[_section(greeting)] + _kudos_detail_blocks(kudos),
    )


def _render_kudos_alert_chat(ctx: RenderContext, lead: str) -> ChatPayload:
    kudos = _require_kudos(ctx)
    recipients = _escape_mrkdwn(', '.join(kudos.recipient_names))
    giver = _escape_mrkdwn(kudos.giver.name)
    greeting = f"Hey {_mention(ctx)}! {lead} {recipients} received kudos from *{giver}*! :star:"
    return ChatPayload(
        text=f"{', '.join(kudos.recipient_names)} received kudos from {kudos.giver.name}!",
        blocks=[_section(greeting)] + _kudos_detail_blocks(kudos),
    )


def render_manager_notification_chat(ctx: RenderContext) -> ChatPayload:
    return _render_kudos_alert_chat(ctx, "Your team member")


def render_other_notification_chat(ctx: RenderContext) -> ChatPayload:
    return _render_kudos_alert_chat(ctx, "You should know")


def render_weekly_reminder_chat(ctx: RenderContext) -> ChatPayload:
    stats = _require_stats(ctx)
    greeting = (
        f"Hey {_mention(ctx)}! 👋\n"
        "This is your weekly reminder to recognize your colleagues' contributions! "
        "Taking a moment to appreciate others can make a big difference in creating "
        "a positive work environment.\n\n"
        f"🌟 <{ctx.link('/give-kudos')}|Click here> to give kudos to someone!"
    )
    blocks = [
        _section(greeting),
        _section("*Your Activity This Week:*"),
        _fields(
            f"*Kudos Received:*\n{stats.kudos_received}",
            f"*Kudos Given:*\n{stats.kudos_given}",
        ),
        _fields(
            f"*Your Position:*\n#{stats.rank}",
            f"*Total Points:*\n{stats.total_points}",
        ),
    ]
    if stats.top_category != NO_TOP_CATEGORY:
        blocks.append(_section(f"*Your Most Active Category:*\n{_escape_mrkdwn(stats.top_category)}"))
    blocks.append(_section(f"*Current Leader:*\n{_escape_mrkdwn(stats.leader)}"))

    return ChatPayload(text="Your weekly kudos reminder", blocks=blocks)


def render_access_request_chat(ctx: RenderContext) -> ChatPayload:
    # Sent to admins; the message is authored by the app and posted as-is
    text = ctx.notification.message or 'No message provided'
    return ChatPayload(text=text, blocks=[_section(text)])


# ============ Email bodies ============

_BUTTON_STYLE = (
    "display: inline-block; background-color: #4F46E5; color: white; "
    "padding: 12px 24px; text-decoration: none; border-radius: 6px;"
)


def _kudos_card_html(kudos: KudosContext, show_giver: bool) -> str:
    category = html.escape(kudos.category_name)
    message = html.escape(kudos.message or '')
    card = f"""<div style="background-color: #F3F4F6; padding: 20px; border-radius: 8px; margin: 20px 0;">
      <p style="color: #4F46E5; margin: 0 0 8px 0;">Category: {category}</p>
      <p style="margin: 0 0 16px 0;">{message}</p>
"""
    gif_url = _sanitize_url(kudos.gif_url)
    if gif_url:
        card += f'      <img src="{gif_url}" alt="Kudos GIF" style="max-width: 200px; border-radius: 4px;">\n'
    if show_giver:
        card += f'      <p style="color: #6B7280; margin: 16px 0 0 0;">From: {html.escape(kudos.giver.name)}</p>\n'
    card += "    </div>"
    return card


def _kudos_email(ctx: RenderContext, kudos: KudosContext, heading: str, intro: str, show_giver: bool) -> str:
    view_url = html.escape(ctx.link(f"/kudos/{kudos.id}"), quote=True)
    intro_html = f"\n    <p>{intro}</p>" if intro else ""
    return f"""<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>{heading}</h2>{intro_html}
    {_kudos_card_html(kudos, show_giver)}
    <a href="{view_url}" style="{_BUTTON_STYLE}">View Kudos</a>
</div>"""


def render_kudos_received_email(ctx: RenderContext) -> EmailPayload:
    if ctx.kudos is None:
        return render_fallback_email(ctx)
    kudos = ctx.kudos
    return EmailPayload(
        subject=f"You received kudos from {kudos.giver.name}!",
        html=_kudos_email(ctx, kudos, "You received kudos!", "", show_giver=True),
    )


def render_manager_notification_email(ctx: RenderContext) -> EmailPayload:
    if ctx.kudos is None:
        return render_fallback_email(ctx)
    kudos = ctx.kudos
    intro = (
        f"{html.escape(join_names(kudos.recipient_names))} received kudos "
        f"from {html.escape(kudos.giver.name)}!"
    )
    return EmailPayload(
        subject="Your team member received kudos!",
        html=_kudos_email(ctx, kudos, "Team Recognition Alert", intro, show_giver=False),
    )


def render_other_notification_email(ctx: RenderContext) -> EmailPayload:
    if ctx.kudos is None:
        return render_fallback_email(ctx)
    kudos = ctx.kudos
    intro = (
        f"{html.escape(join_names(kudos.recipient_names))} received kudos "
        f"from {html.escape(kudos.giver.name)}!"
    )
    return EmailPayload(
        subject="Kudos Recognition Notification",
        html=_kudos_email(ctx, kudos, "Kudos Recognition Notification", intro, show_giver=False),
    )


def _stat_tile(value: Any, label: str) -> str:
    return f"""<div style="text-align: center; padding: 16px; background-color: white; border-radius: 6px;">
            <div style="font-size: 24px; font-weight: bold; color: #4f46e5;">{value}</div>
            <div style="color: #6b7280; font-size: 14px;">{label}</div>
          </div>"""


def _label_tile(label: str, value: str) -> str:
    return f"""<div style="text-align: center; padding: 16px; background-color: white; border-radius: 6px; margin-bottom: 16px;">
          <div style="color: #6b7280; font-size: 14px;">{label}</div>
          <div style="font-size: 18px; font-weight: 600; color: #4f46e5;">{value}</div>
        </div>"""


def render_weekly_reminder_email(ctx: RenderContext) -> EmailPayload:
    stats = _require_stats(ctx)
    give_url = html.escape(ctx.link('/give-kudos'), quote=True)
    my_kudos_url = html.escape(ctx.link('/my-kudos'), quote=True)
    leaderboard_url = html.escape(ctx.link('/leaderboard'), quote=True)
    settings_url = html.escape(ctx.link('/settings'), quote=True)

    top_category = ""
    if stats.top_category != NO_TOP_CATEGORY:
        top_category = _label_tile("Most Active Category", html.escape(stats.top_category))

    body = f"""<!DOCTYPE html>
<html>
<head>
  <meta charset="utf-8">
  <meta name="viewport" content="width=device-width, initial-scale=1.0">
  <title>Weekly Kudos Update</title>
</head>
<body style="font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Helvetica, Arial, sans-serif; line-height: 1.5; color: #374151; margin: 0; padding: 0; background-color: #f3f4f6;">
  <div style="max-width: 600px; margin: 0 auto; padding: 20px;">
    <div style="background-color: white; border-radius: 8px; padding: 32px; margin-bottom: 24px;">
      <h1 style="margin: 0 0 24px 0; color: #1f2937; font-size: 24px; text-align: center;">👋 Hello {html.escape(ctx.user.name)}!</h1>
      <p style="margin: 0 0 24px 0; text-align: center; color: #6b7280;">
        This is your weekly reminder to recognize your colleagues' contributions! Taking a moment to appreciate others can make a big difference in creating a positive work environment.
      </p>
      <div style="margin-bottom: 32px; text-align: center;">
        <a href="{give_url}" style="{_BUTTON_STYLE}">Give Kudos Now</a>
      </div>

      <div style="background-color: #f9fafb; border-radius: 8px; padding: 24px; margin-bottom: 24px;">
        <h2 style="margin: 0 0 16px 0; color: #4f46e5; font-size: 18px;">
          <a href="{my_kudos_url}" style="color: inherit; text-decoration: none;">📊 Your Weekly Activity</a>
        </h2>
        <div style="display: grid; grid-template-columns: 1fr 1fr; gap: 16px; margin-bottom: 16px;">
          {_stat_tile(stats.kudos_received, 'Kudos Received')}
          {_stat_tile(stats.kudos_given, 'Kudos Given')}
        </div>
        {top_category}
      </div>

      <div style="background-color: #f9fafb; border-radius: 8px; padding: 24px;">
        <h2 style="margin: 0 0 16px 0; color: #4f46e5; font-size: 18px;">
          <a href="{leaderboard_url}" style="color: inherit; text-decoration: none;">🏆 Leaderboard Update</a>
        </h2>
        <div style="display: grid; grid-template-columns: 1fr 1fr; gap: 16px; margin-bottom: 16px;">
          {_stat_tile(f'#{stats.rank}', 'Your Position')}
          {_stat_tile(stats.total_points, 'Total Points')}
        </div>
        {_label_tile('Current Leader', html.escape(stats.leader))}
      </div>
    </div>

    <div style="text-align: center; color: #6b7280; font-size: 12px;">
      <p>
        You're receiving this email because you've opted in to weekly updates from Kudos.
        <br>
        To update your notification preferences, visit your <a href="{settings_url}" style="color: #4f46e5; text-decoration: none;">settings page</a>.
      </p>
    </div>
  </div>
</body>
</html>"""
    return EmailPayload(subject="🌟 Your Weekly Kudos Update", html=body)


def render_access_request_email(ctx: RenderContext) -> EmailPayload:
    message = html.escape(ctx.notification.message or 'No message provided')
    app_url = html.escape(ctx.link(), quote=True)
    body = f"""<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Kudos Feedback</h2>
    <p>{message}</p>
    <p style="margin-top: 24px; color: #6B7280; font-size: 14px;">
      You're receiving this email because you are an admin for the <a href="{app_url}">Kudos app</a>.
    </p>
</div>"""
    return EmailPayload(subject="Feedback from Kudos", html=body)


def render_fallback_email(ctx: RenderContext) -> EmailPayload:
    app_url = html.escape(ctx.link(), quote=True)
    body = f"""<div style="font-family: sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Kudos Notification</h2>
    <p>You have a new notification from Kudos.</p>
    <a href="{app_url}" style="{_BUTTON_STYLE}">View Kudos</a>
</div>"""
    return EmailPayload(subject="Kudos Notification", html=body)


# ============ Registry ============

CHAT_RENDERERS: Dict[NotificationType, Callable[[RenderContext], ChatPayload]] = {
    NotificationType.KUDOS_RECEIVED: render_kudos_received_chat,
    NotificationType.MANAGER_NOTIFICATION: render_manager_notification_chat,
    NotificationType.OTHER_NOTIFICATION: render_other_notification_chat,
    NotificationType.WEEKLY_REMINDER: render_weekly_reminder_chat,
    NotificationType.ACCESS_REQUEST: render_access_request_chat,
}

EMAIL_RENDERERS: Dict[NotificationType, Callable[[RenderContext], EmailPayload]] = {
    NotificationType.KUDOS_RECEIVED: render_kudos_received_email,
    NotificationType.MANAGER_NOTIFICATION: render_manager_notification_email,
    NotificationType.OTHER_NOTIFICATION: render_other_notification_email,
    NotificationType.WEEKLY_REMINDER: render_weekly_reminder_email,
    NotificationType.ACCESS_REQUEST: render_access_request_email,
}

for _registry in (CHAT_RENDERERS, EMAIL_RENDERERS):
    _missing = set(NotificationType) - set(_registry)
    if _missing:
        raise RuntimeError(f"No renderer registered for: {sorted(t.value for t in _missing)}")


class NotificationMessageBuilder:

    @staticmethod
    def build(ctx: RenderContext) -> ChannelPayload:
        """Render `ctx.notification` for its channel.

        Raises:
            UnsupportedNotificationTypeError: unknown `type`
            UnsupportedChannelError: unknown `channel`
            RenderError: required context (kudos, stats) is missing
        """
        notification_type = parse_notification_type(ctx.notification.type)
        channel = parse_channel(ctx.notification.channel)

        if channel == NotificationChannelType.EMAIL:
            return EMAIL_RENDERERS[notification_type](ctx)

        payload = CHAT_RENDERERS[notification_type](ctx)
        if ctx.notification.kudos_id:
            payload.blocks.append({
                'type': 'context',
                'elements': [{
                    'type': 'mrkdwn',
                    'text': f"View on Kudos: {ctx.link(f'/kudos/{ctx.notification.kudos_id}')}",
                }],
            })
        return payload
