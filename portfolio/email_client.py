"""Delivery of contact form submissions by email."""

import base64
import html
import logging
import time
from email.mime.text import MIMEText
from pathlib import Path
from typing import Optional, Protocol

from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build

from .config import Config
from .models import ContactFormData

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/gmail.send"]


class EmailDeliveryError(Exception):
    """Raised when a message could not be handed to the email provider."""


class EmailSender(Protocol):
    def send(self, subject: str, recipient: str, body: str) -> None: ...


def build_subject(form: ContactFormData) -> str:
    return f"New Contact Form Submission from {form.full_name}"


def build_body(form: ContactFormData) -> str:
    """Render the HTML body of the notification email."""
    phone = form.phone or "Not provided"
    return (
        "<h2>New Contact Form Submission</h2>\n"
        f"<p><strong>Name:</strong> {html.escape(form.full_name)}</p>\n"
        f"<p><strong>Email:</strong> {html.escape(form.email)}</p>\n"
        f"<p><strong>Phone:</strong> {html.escape(phone)}</p>\n"
        f"<p><strong>Received:</strong> {form.received_at:%Y-%m-%d %H:%M}</p>\n"
        "<p><strong>Message:</strong></p>\n"
        f"<p>{html.escape(form.message)}</p>\n"
    )


class LoggingEmailSender:
    """Writes messages to the log instead of delivering them."""

    def __init__(self, delay_seconds: float = 1.0):
        self.delay_seconds = delay_seconds

    def send(self, subject: str, recipient: str, body: str) -> None:
        logger.info(f"Contact form submission for {recipient}: {subject}")
        logger.debug(f"Message body:\n{body}")
        if self.delay_seconds > 0:
            time.sleep(self.delay_seconds)


def get_credentials(config_dir: Optional[Path] = None) -> Credentials:
    """Get or refresh Gmail API credentials."""
    if config_dir is None:
        config_dir = Path(__file__).parent.parent / "config"
    token_path = config_dir / "gmail_send_token.json"
    credentials_path = config_dir / "credentials.json"

    creds = None

    if token_path.exists():
        creds = Credentials.from_authorized_user_file(str(token_path), SCOPES)

    if not creds or not creds.valid:
        if creds and creds.expired and creds.refresh_token:
            logger.info("Refreshing expired credentials")
            creds.refresh(Request())
        else:
            if not credentials_path.exists():
                raise FileNotFoundError(
                    f"Credentials file not found: {credentials_path}. "
                    "Download credentials.json from Google Cloud Console."
                )
            logger.info("Starting OAuth flow for Gmail")
            flow = InstalledAppFlow.from_client_secrets_file(
                str(credentials_path), SCOPES
            )
            creds = flow.run_local_server(port=0)

        with open(token_path, "w") as token:
            token.write(creds.to_json())
            logger.info(f"Saved credentials to {token_path}")

    return creds


def encode_message(
    subject: str, recipient: str, body: str, sender: Optional[str] = None
) -> dict[str, str]:
    """Build the Gmail API payload for an HTML message."""
    message = MIMEText(body, "html", "utf-8")
    message["To"] = recipient
    message["Subject"] = subject
    if sender:
        message["From"] = sender

    raw = base64.urlsafe_b64encode(message.as_bytes()).decode("ascii")
    return {"raw": raw}


class GmailEmailSender:
    """Sends messages from the authorized Gmail account."""

    def __init__(self, sender_address: Optional[str] = None, service=None):
        self.sender_address = sender_address
        self._service = service

    @property
    def service(self):
        if self._service is None:
            self._service = build("gmail", "v1", credentials=get_credentials())
        return self._service

    def send(self, subject: str, recipient: str, body: str) -> None:
        payload = encode_message(subject, recipient, body, self.sender_address)
        try:
            result = (
                self.service.users()
                .messages()
                .send(userId="me", body=payload)
                .execute()
            )
        except Exception as e:
            raise EmailDeliveryError(f"Gmail rejected message to {recipient}: {e}") from e

        logger.info(f"Sent email {result.get('id', '')} to {recipient}")


def get_email_sender(config: Config) -> EmailSender:
    """Pick the sender implementation named in the configuration."""
    if config.email_backend == "gmail":
        return GmailEmailSender(sender_address=config.sender_address)
    return LoggingEmailSender(delay_seconds=config.email_delay_seconds)


def send_contact_email(
    sender: EmailSender, form: ContactFormData, recipient: str
) -> None:
    """Deliver a contact form submission to the site owner."""
    sender.send(build_subject(form), recipient, build_body(form))
