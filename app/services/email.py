"""Outbound email through an HTTP transactional email API (password-reset links)."""

from __future__ import annotations

import html
import logging
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from app.core.config import Settings

logger = logging.getLogger(__name__)

RESET_EMAIL_SUBJECT = "Password reset for Financial Tracker"


class EmailNotConfiguredError(Exception):
    """Raised when an email is requested but the provider settings are missing."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class EmailDeliveryError(Exception):
    """Raised when the email provider rejects the request or cannot be reached."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(message)


def _is_email_configured(settings: Settings) -> bool:
    if not settings.EMAIL_API_URL or not settings.EMAIL_API_URL.strip():
        return False
    if not settings.EMAIL_FROM or not settings.EMAIL_FROM.strip():
        return False
    if settings.EMAIL_API_KEY is None:
        return False
    key = settings.EMAIL_API_KEY.get_secret_value()
    if not key or not key.strip():
        return False
    return True


def build_reset_link(base_url: str, token: str) -> str:
    return f"{base_url.rstrip('/')}/api/auth/reset-password/{token}"


def build_password_reset_email(link: str, expires_minutes: int) -> tuple[str, str]:
    """Return (subject, html body) for a reset-link email."""
    safe_link = html.escape(link, quote=True)
    if expires_minutes % 60 == 0:
        hours = expires_minutes // 60
        window = f"{hours} hour" if hours == 1 else f"{hours} hours"
    else:
        window = f"{expires_minutes} minutes"
    body = f"""<div style="font-family: Arial, sans-serif; max-width: 600px; padding: 20px; border: 1px solid #ddd; margin: auto;">
  <h2 style="color: #333; text-align: center;">Reset Your Password</h2>
  <p style="font-size: 16px; color: #555;">You recently requested to reset your password for your account. Click the button below to proceed:</p>
  <div style="text-align: center; margin: 20px 0;">
    <a href="{safe_link}" style="background-color: #4CAF50; color: white; padding: 12px 24px; text-decoration: none; font-size: 16px; border-radius: 5px; display: inline-block;">Reset Password</a>
  </div>
  <p style="font-size: 14px; color: #555; word-break: break-all;">{safe_link}</p>
  <p style="font-size: 14px; color: #777;">If you didn't request a password reset, you can safely ignore this email.</p>
  <p style="font-size: 14px; color: #777;">This link will expire in {window}.</p>
</div>"""
    return RESET_EMAIL_SUBJECT, body


async def send_email(to: str, subject: str, html_body: str, settings: Settings) -> None:
    """
    Send one HTML email via EMAIL_API_URL.

    Raises EmailNotConfiguredError if provider settings are missing and
    EmailDeliveryError on transport failure or a non-2xx response.
    """
    if not _is_email_configured(settings):
        raise EmailNotConfiguredError(
            "Email delivery is not configured; set EMAIL_API_URL, EMAIL_API_KEY, EMAIL_FROM."
        )
    payload: dict[str, Any] = {
        "from": (settings.EMAIL_FROM or "").strip(),
        "to": [to],
        "subject": subject,
        "html": html_body,
    }
    headers = {"Authorization": f"Bearer {settings.EMAIL_API_KEY.get_secret_value()}"}
    recipient_domain = to.rsplit("@", 1)[-1]
    try:
        async with httpx.AsyncClient(timeout=settings.EMAIL_REQUEST_TIMEOUT_SEC) as client:
            resp = await client.post(settings.EMAIL_API_URL, json=payload, headers=headers)
    except httpx.TimeoutException as e:
        raise EmailDeliveryError("Email provider timed out.") from e
    except httpx.HTTPError as e:
        raise EmailDeliveryError(f"Email provider unreachable: {e!s}") from e

    if resp.status_code >= 400:
        detail = resp.text[:500] if resp.text else "Unknown error"
        logger.warning(
            "Email provider rejected message to domain=%s status=%s",
            recipient_domain,
            resp.status_code,
        )
        raise EmailDeliveryError(
            f"Email provider returned {resp.status_code}: {detail}", resp.status_code
        )
    logger.info("Email sent to domain=%s subject=%r", recipient_domain, subject)
