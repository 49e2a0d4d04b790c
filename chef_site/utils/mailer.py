"""
Outbound email over SMTP with Jinja2-rendered HTML bodies.
"""
from __future__ import annotations

import asyncio
import logging
import smtplib
from dataclasses import dataclass
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from pathlib import Path
from typing import Any, Dict, Optional

from jinja2 import Environment, FileSystemLoader, select_autoescape

from chef_site.errors import DispatchError

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).resolve().parents[1] / "templates"


@dataclass
class OutgoingEmail:
    to: str
    subject: str
    html: str
    sender_name: str
    reply_to: Optional[str] = None


class TemplateRenderer:
    def __init__(self, template_dir: Path = TEMPLATE_DIR) -> None:
        self.jinja_env = Environment(
            loader=FileSystemLoader(str(template_dir)),
            autoescape=select_autoescape(["html", "xml"]),
        )

    def render(self, template_name: str, context: Dict[str, Any]) -> str:
        tpl = self.jinja_env.get_template(template_name)
        return tpl.render(**context)


class SmtpMailer:
    """Sends mail through the configured SMTP relay, one connection per message."""

    def __init__(
        self,
        host: str,
        port: int,
        user: str = "",
        password: str = "",
        use_tls: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.use_tls = use_tls
        self.timeout = timeout

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user)

    async def send(self, email: OutgoingEmail) -> None:
        """
        Raises:
            DispatchError: If SMTP is not configured or the transport fails
        """
        if not self.configured:
            logger.error("SMTP host/user not configured, cannot send email")
            raise DispatchError("Email service is not configured")
        await asyncio.to_thread(self._send_sync, email)

    def _build_message(self, email: OutgoingEmail) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["From"] = formataddr((email.sender_name, self.user))
        msg["To"] = email.to
        msg["Subject"] = email.subject
        if email.reply_to:
            msg["Reply-To"] = email.reply_to
        msg.attach(MIMEText(email.html, "html", "utf-8"))
        return msg

    def _send_sync(self, email: OutgoingEmail) -> None:
        msg = self._build_message(email)
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                server.ehlo()
                if self.use_tls:
                    server.starttls()
                    server.ehlo()
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email to {email.to} failed: {type(e).__name__}: {e}")
            raise DispatchError() from e
        logger.info(f"Sent email '{email.subject}' to {email.to}")
