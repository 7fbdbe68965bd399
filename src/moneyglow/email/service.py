"""
Outgoing mail with a pluggable delivery provider.

Providers: SMTP (default), Resend HTTP API, AWS SES. Chosen by
``MG_EMAIL_PROVIDER``. Sends never raise; they report success as a bool and
callers decide whether a failure matters.
"""

from __future__ import annotations

import hashlib
import ssl
from abc import ABC, abstractmethod
from collections.abc import Callable
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import TYPE_CHECKING, Any

import aioboto3
import aiosmtplib
import httpx
import structlog

from moneyglow.config import get_settings
from moneyglow.email.templates import magic_link_email, welcome_email

if TYPE_CHECKING:
    from redis.asyncio import Redis

logger = structlog.get_logger()

_TEMPLATE_REGISTRY: dict[str, Callable[..., tuple[str, str, str]]] = {
    "magic_link": magic_link_email,
    "welcome": welcome_email,
}


class BaseEmailProvider(ABC):
    """Delivery backend."""

    name = "base"

    @abstractmethod
    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """Deliver one message. Returns True on success."""
        ...


class SMTPProvider(BaseEmailProvider):
    """Send via SMTP using aiosmtplib."""

    name = "smtp"

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        from_address: str,
        from_name: str,
        use_tls: bool = True,
    ) -> None:
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.from_address = from_address
        self.from_name = from_name
        self.use_tls = use_tls

    def build_message(self, to_email: str, subject: str, html_body: str, text_body: str) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = f"{self.from_name} <{self.from_address}>"
        msg["To"] = to_email
        msg["Subject"] = subject
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))
        return msg

    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        msg = self.build_message(to_email, subject, html_body, text_body)
        try:
            await aiosmtplib.send(
                msg,
                hostname=self.host,
                port=self.port,
                username=self.username or None,
                password=self.password or None,
                start_tls=self.use_tls,
                tls_context=ssl.create_default_context() if self.use_tls else None,
            )
        except (aiosmtplib.SMTPException, OSError):
            logger.exception("email_send_failed", to=to_email, provider=self.name)
            return False
        logger.info("email_sent", to=to_email, subject=subject, provider=self.name)
        return True


class ResendProvider(BaseEmailProvider):
    """Send via the Resend HTTP API."""

    name = "resend"
    API_URL = "https://api.resend.com/emails"

    def __init__(self, api_key: str, from_address: str, from_name: str) -> None:
        self.api_key = api_key
        self.from_address = from_address
        self.from_name = from_name

    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        try:
            async with httpx.AsyncClient(timeout=10.0) as client:
                response = await client.post(
                    self.API_URL,
                    headers={"Authorization": f"Bearer {self.api_key}"},
                    json={
                        "from": f"{self.from_name} <{self.from_address}>",
                        "to": [to_email],
                        "subject": subject,
                        "html": html_body,
                        "text": text_body,
                    },
                )
                response.raise_for_status()
        except httpx.HTTPError:
            logger.exception("email_send_failed", to=to_email, provider=self.name)
            return False
        logger.info("email_sent", to=to_email, subject=subject, provider=self.name)
        return True


class SESProvider(BaseEmailProvider):
    """Send via AWS SES."""

    name = "ses"

    def __init__(self, region: str, from_address: str, from_name: str) -> None:
        self.region = region
        self.from_address = from_address
        self.from_name = from_name

    async def send(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        session = aioboto3.Session()
        try:
            async with session.client("ses", region_name=self.region) as ses:
                await ses.send_email(
                    Source=f"{self.from_name} <{self.from_address}>",
                    Destination={"ToAddresses": [to_email]},
                    Message={
                        "Subject": {"Data": subject, "Charset": "UTF-8"},
                        "Body": {
                            "Text": {"Data": text_body, "Charset": "UTF-8"},
                            "Html": {"Data": html_body, "Charset": "UTF-8"},
                        },
                    },
                )
        except Exception:
            # botocore raises a wide family of client/credential errors.
            logger.exception("email_send_failed", to=to_email, provider=self.name)
            return False
        logger.info("email_sent", to=to_email, subject=subject, provider=self.name)
        return True


def _create_provider() -> BaseEmailProvider:
    """Build the provider named in settings."""
    settings = get_settings()
    provider_name = settings.email_provider.lower()

    if provider_name == "smtp":
        return SMTPProvider(
            host=settings.smtp_host,
            port=settings.smtp_port,
            username=settings.smtp_username,
            password=settings.smtp_password,
            from_address=settings.email_from_address,
            from_name=settings.email_from_name,
            use_tls=settings.smtp_use_tls,
        )
    if provider_name == "resend":
        return ResendProvider(
            api_key=settings.resend_api_key,
            from_address=settings.email_from_address,
            from_name=settings.email_from_name,
        )
    if provider_name == "ses":
        return SESProvider(
            region=settings.ses_region,
            from_address=settings.email_from_address,
            from_name=settings.email_from_name,
        )
    msg = f"Unsupported email provider: {provider_name}"
    raise ValueError(msg)


class EmailService:
    """Template rendering plus a per-recipient hourly send limit."""

    RATE_LIMIT_WINDOW = 3600

    def __init__(
        self,
        provider: BaseEmailProvider | None = None,
        redis: Redis | None = None,
        max_per_hour: int | None = None,
    ) -> None:
        self.provider = provider or _create_provider()
        self._redis = redis
        self.max_per_hour = max_per_hour or get_settings().email_rate_limit_per_hour

    async def _check_rate_limit(self, email: str) -> bool:
        if self._redis is None:
            return True
        key = f"email_rate:{hashlib.sha256(email.lower().encode()).hexdigest()}"
        count = await self._redis.incr(key)
        if count == 1:
            await self._redis.expire(key, self.RATE_LIMIT_WINDOW)
        return int(count) <= self.max_per_hour

    async def send_email(self, to: str, subject: str, html_body: str, text_body: str) -> bool:
        """Send one message. False if rate limited or the provider failed."""
        if not await self._check_rate_limit(to):
            logger.warning("email_rate_limited", to=to, subject=subject)
            return False
        return await self.provider.send(to, subject, html_body, text_body)

    async def send_template(self, to: str, template_name: str, context: dict[str, Any]) -> bool:
        """
        Render a registered template with ``context`` as keyword arguments and send it.

        Raises:
            ValueError: Unknown template name.
        """
        template_func = _TEMPLATE_REGISTRY.get(template_name)
        if template_func is None:
            msg = f"Unknown template: {template_name}"
            raise ValueError(msg)
        subject, html_body, text_body = template_func(**context)
        return await self.send_email(to, subject, html_body, text_body)
