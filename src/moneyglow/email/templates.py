"""
Email templates for MoneyGlow.

Inline CSS only, so they survive Gmail and Outlook. Light card on a soft
background with the MoneyGlow pink accent.

Each template function returns (subject, html_body, text_body).
"""

from __future__ import annotations

from html import escape

# Color constants
BG_PAGE = "#FFF7F2"
BG_CARD = "#FFFFFF"
PINK = "#FF6B9D"
ORANGE = "#FFB86C"
TEXT_PRIMARY = "#1F1A2E"
TEXT_SECONDARY = "#6B6478"
BORDER = "#F1E4EA"


def _base_layout(content: str, app_name: str = "MoneyGlow") -> str:
    """Wrap content in the shared layout."""
    return f"""\
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{app_name}</title>
</head>
<body style="margin: 0; padding: 0; background-color: {BG_PAGE}; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif;">
    <table role="presentation" cellspacing="0" cellpadding="0" border="0" width="100%" style="background-color: {BG_PAGE};">
        <tr>
            <td align="center" style="padding: 40px 20px;">
                <table role="presentation" cellspacing="0" cellpadding="0" border="0" width="560" style="max-width: 560px; width: 100%;">
                    <tr>
                        <td align="center" style="padding-bottom: 24px;">
                            <span style="font-size: 26px;">&#x2728;</span>
                            <span style="font-size: 22px; font-weight: 700; color: {PINK}; margin-left: 6px;">{app_name}</span>
                        </td>
                    </tr>
                    <tr>
                        <td style="background-color: {BG_CARD}; border: 1px solid {BORDER}; border-radius: 16px; padding: 36px 28px;">
                            {content}
                        </td>
                    </tr>
                    <tr>
                        <td align="center" style="padding-top: 24px;">
                            <p style="color: {TEXT_SECONDARY}; font-size: 12px; line-height: 1.5; margin: 0;">
                                Sent by {app_name}, your money glow-up buddy.<br>
                                If you didn't expect this email, you can safely ignore it.
                            </p>
                        </td>
                    </tr>
                </table>
            </td>
        </tr>
    </table>
</body>
</html>"""


def _button(url: str, label: str) -> str:
    """Pink call-to-action button."""
    return f"""\
<table role="presentation" cellspacing="0" cellpadding="0" border="0" style="margin: 28px auto;">
    <tr>
        <td align="center" style="background-color: {PINK}; border-radius: 999px;">
            <a href="{url}" target="_blank" style="display: inline-block; padding: 14px 36px; color: #FFFFFF; font-size: 16px; font-weight: 600; text-decoration: none; border-radius: 999px;">
                {label}
            </a>
        </td>
    </tr>
</table>"""


def magic_link_email(magic_url: str, expires_minutes: int = 15) -> tuple[str, str, str]:
    """
    Passwordless login link.

    Returns:
        (subject, html_body, text_body)
    """
    subject = "Your MoneyGlow Login Link"
    safe_url = escape(magic_url, quote=True)
    content = f"""\
<h1 style="color: {TEXT_PRIMARY}; font-size: 24px; font-weight: 700; margin: 0 0 16px 0;">Log in to MoneyGlow</h1>
<p style="color: {TEXT_SECONDARY}; font-size: 16px; line-height: 1.6; margin: 0 0 8px 0;">
    Tap the button below to log in. No password needed.
</p>
{_button(safe_url, "Log in to MoneyGlow")}
<p style="color: {TEXT_SECONDARY}; font-size: 13px; line-height: 1.5; margin: 24px 0 0 0;">
    This link expires in <strong style="color: {TEXT_PRIMARY};">{expires_minutes} minutes</strong> and works once.
</p>
<hr style="border: none; border-top: 1px solid {BORDER}; margin: 24px 0;">
<p style="color: {TEXT_SECONDARY}; font-size: 12px; line-height: 1.5; margin: 0;">
    If the button doesn't work, copy and paste this URL:<br>
    <a href="{safe_url}" style="color: {PINK}; word-break: break-all;">{safe_url}</a>
</p>"""
    html_body = _base_layout(content)
    text_body = (
        f"Log in to MoneyGlow by opening this link:\n\n{magic_url}\n\n"
        f"This link expires in {expires_minutes} minutes and can only be used once.\n\n"
        f"If you did not request this, you can ignore this email.\n\n"
        f"-- MoneyGlow"
    )
    return subject, html_body, text_body


def welcome_email(name: str | None, dashboard_url: str) -> tuple[str, str, str]:
    """
    Sent once onboarding is complete.

    Returns:
        (subject, html_body, text_body)
    """
    display = name or "Creator"
    safe_name = escape(display)
    subject = "Welcome to MoneyGlow!"
    content = f"""\
<h1 style="color: {TEXT_PRIMARY}; font-size: 24px; font-weight: 700; margin: 0 0 16px 0;">Welcome, {safe_name}!</h1>
<p style="color: {TEXT_SECONDARY}; font-size: 16px; line-height: 1.6; margin: 0 0 16px 0;">
    Your money glow-up starts today. Here's how to earn your first XP:
</p>
<ul style="color: {TEXT_SECONDARY}; font-size: 15px; line-height: 1.8; margin: 0 0 8px 0; padding-left: 20px;">
    <li>Log your first income entry <span style="color: {ORANGE};">+10 XP</span></li>
    <li>Set up your 50/30/20 budget <span style="color: {ORANGE};">+15 XP</span></li>
    <li>Take the money personality quiz <span style="color: {ORANGE};">+25 XP</span></li>
</ul>
{_button(escape(dashboard_url, quote=True), "Open my dashboard")}"""
    html_body = _base_layout(content)
    text_body = (
        f"Hi {display},\n\n"
        f"Welcome to MoneyGlow! Your money glow-up starts today.\n\n"
        f"Earn your first XP:\n"
        f"- Log your first income entry (+10 XP)\n"
        f"- Set up your 50/30/20 budget (+15 XP)\n"
        f"- Take the money personality quiz (+25 XP)\n\n"
        f"Open your dashboard: {dashboard_url}\n\n"
        f"-- MoneyGlow"
    )
    return subject, html_body, text_body
