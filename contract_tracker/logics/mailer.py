"""
Outbound notification email.

A thin SMTP sender plus the message templates used by the renewal sync and
the reminder job. Callers send per row and catch failures themselves so one
bad address never aborts a batch.
"""

import logging
import smtplib
from datetime import date
from email.message import EmailMessage
from email.utils import formataddr
from typing import Optional, Tuple

from contract_tracker import settings

logger = logging.getLogger(__name__)


class Mailer:
    """SMTP mail sender configured from the [smtp] section of config.ini."""

    def __init__(
        self,
        host: str = settings.SMTP_HOST,
        port: int = settings.SMTP_PORT,
        username: str = settings.SMTP_USER,
        password: str = settings.SMTP_PASSWORD,
        sender: str = settings.SMTP_FROM,
        use_tls: bool = settings.SMTP_USE_TLS,
        timeout: float = settings.SMTP_TIMEOUT,
        display_name: str = settings.SMTP_DISPLAY_NAME
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.use_tls = use_tls
        self.timeout = timeout
        self.display_name = display_name

    @property
    def configured(self) -> bool:
        return bool(self.host and self.sender)

    def send(self, to: str, subject: str, body: str, display_name: Optional[str] = None) -> bool:
        """
        Send one plain-text email.

        Returns:
            True if handed to the SMTP server, False if SMTP is not configured

        Raises:
            smtplib.SMTPException, OSError: On delivery failure
        """
        if not self.configured:
            logger.warning(f"[Mailer] SMTP not configured; skipping email to {to}: {subject}")
            return False

        msg = EmailMessage()
        msg["From"] = formataddr((display_name or self.display_name, self.sender))
        msg["To"] = to
        msg["Subject"] = subject
        msg.set_content(body)

        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            if self.use_tls:
                server.starttls()
            if self.username and self.password:
                server.login(self.username, self.password)
            server.send_message(msg)

        logger.info(f"[Mailer] Sent '{subject}' to {to}")
        return True


def notify(mailer: Mailer, to: str, subject: str, body: str) -> str:
    """
    Send one row's email without letting a failure escape.

    Returns:
        "sent", "skipped" (SMTP not configured) or "failed"
    """
    try:
        return "sent" if mailer.send(to, subject, body) else "skipped"
    except Exception as e:
        logger.error(f"[Mailer] Failed to send '{subject}' to {to}: {e}", exc_info=True)
        return "failed"


RENEWAL_SUBJECT = "Your contract has been renewed - {company}"
RENEWAL_BODY = """Dear {company},

Thank you for continuing with us. Your contract for pilot number {pilot_number} has been renewed.

New contract period: {start} to {end}

If any of these details are incorrect, please reply to this email.

Kind regards,
{display_name}
"""

TERMINATION_SUBJECT = "Contract termination notice - {company}"
TERMINATION_BODY = """Dear {company},

As requested, your contract for pilot number {pilot_number} will not be renewed.
Service ends on {end}.

We are sorry to see you go. If this was a mistake, please reply before the end date.

Kind regards,
{display_name}
"""

REMINDER_SUBJECT = "Your contract ends in {days} days - {company}"
REMINDER_BODY = """Dear {company},

Your contract for pilot number {pilot_number} ends on {end} ({days} days from today).

Please let us know whether you would like to renew.

Kind regards,
{display_name}
"""


def _fmt(value: date) -> str:
    return value.strftime("%d %b %Y")


def renewal_confirmation(company: str, pilot_number: str, start: date, end: date,
                         display_name: str = settings.SMTP_DISPLAY_NAME) -> Tuple[str, str]:
    subject = RENEWAL_SUBJECT.format(company=company)
    body = RENEWAL_BODY.format(
        company=company, pilot_number=pilot_number, start=_fmt(start), end=_fmt(end), display_name=display_name
    )
    return subject, body


def termination_notice(company: str, pilot_number: str, end: date,
                       display_name: str = settings.SMTP_DISPLAY_NAME) -> Tuple[str, str]:
    subject = TERMINATION_SUBJECT.format(company=company)
    body = TERMINATION_BODY.format(
        company=company, pilot_number=pilot_number, end=_fmt(end), display_name=display_name
    )
    return subject, body


def renewal_reminder(company: str, pilot_number: str, end: date, days: int,
                     display_name: str = settings.SMTP_DISPLAY_NAME) -> Tuple[str, str]:
    subject = REMINDER_SUBJECT.format(company=company, days=days)
    body = REMINDER_BODY.format(
        company=company, pilot_number=pilot_number, end=_fmt(end), days=days, display_name=display_name
    )
    return subject, body
