"""Status mail delivery over SMTP."""

import logging
import smtplib
from email.message import EmailMessage

from .config import EmailConfig
from .exceptions import MirrorMailError
from .report import mail_subject

logger = logging.getLogger(__name__)


class Mailer:
    """Sends PASS/FAIL status mails for one server."""

    def __init__(
        self,
        email: EmailConfig,
        server_id: str,
        skip_sending: bool = False,
        timeout: float = 30.0,
    ):
        """Initialize mailer.

        Args:
            email: Mail settings
            server_id: Server identifier used in subject and sender name
            skip_sending: If True, only log the mail
            timeout: SMTP connection timeout in seconds
        """
        self.email = email
        self.server_id = server_id
        self.skip_sending = skip_sending
        self.timeout = timeout

    def build_message(self, label: str, body: str) -> EmailMessage:
        """Build the status mail.

        Raises:
            ValueError: If label or body is empty
        """
        if not label or not body:
            raise ValueError("label and body must not be empty")

        mailer = self.email.mailer
        message = EmailMessage()
        message["Subject"] = mail_subject(label, self.server_id)
        message["From"] = f'"{self.server_id} mirror" <{mailer.username}>'
        message["To"] = ", ".join(self.email.recipients)
        message.set_content(body)
        return message

    def send(self, label: str, body: str) -> None:
        """Send a status mail.

        Args:
            label: PASS or FAIL
            body: Plain-text body

        Raises:
            MirrorMailError: If the SMTP transaction fails
        """
        message = self.build_message(label, body)
        logger.info(f"Sending mail with subject '{message['Subject']}'")
        logger.debug("Mail body:\n%s", body)

        if self.skip_sending:
            logger.warning("Mail sending is disabled, not sending")
            return

        mailer = self.email.mailer
        smtp_class = smtplib.SMTP_SSL if mailer.secure else smtplib.SMTP
        try:
            with smtp_class(mailer.host, mailer.port, timeout=self.timeout) as smtp:
                if not mailer.secure:
                    self._upgrade(smtp)
                smtp.login(mailer.username, mailer.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as e:
            raise MirrorMailError(f"Failed to send mail via {mailer.host}: {e}") from e

        logger.debug("Mail sent to %s", ", ".join(self.email.recipients))

    def _upgrade(self, smtp: smtplib.SMTP) -> None:
        """Switch a plain connection to TLS when the server offers STARTTLS."""
        smtp.ehlo()
        if smtp.has_extn("starttls"):
            smtp.starttls()
            smtp.ehlo()
        else:
            logger.warning(
                f"{self.email.mailer.host} does not offer STARTTLS, "
                "logging in over an unencrypted connection"
            )
