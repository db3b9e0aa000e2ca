"""Tests for the SMTP mailer."""

import smtplib
from unittest.mock import MagicMock, patch

import pytest

from rsyncmirror.config import EmailConfig, MailerConfig
from rsyncmirror.exceptions import MirrorMailError
from rsyncmirror.mailer import Mailer


@pytest.fixture
def email_config():
    """Provide mail settings."""
    return EmailConfig(
        mailer=MailerConfig(
            host="smtp.example.org",
            port=465,
            username="mirror@example.org",
            password="secret",
            secure=True,
        ),
        recipients=("ops@example.org", "admin@example.org"),
    )


class TestMailer:
    """Tests for Mailer."""

    def test_build_message(self, email_config):
        """Subject, sender and recipients follow the server identifier."""
        message = Mailer(email_config, "example.org").build_message("PASS", "body")

        assert message["Subject"] == "[PASS] example.org mirror"
        assert message["From"] == '"example.org mirror" <mirror@example.org>'
        assert message["To"] == "ops@example.org, admin@example.org"
        assert message.get_content().strip() == "body"

    @pytest.mark.parametrize("label,body", [("", "body"), ("FAIL", "")])
    def test_empty_label_or_body(self, email_config, label, body):
        """Label and body must not be empty."""
        with pytest.raises(ValueError):
            Mailer(email_config, "example.org").build_message(label, body)

    @patch("rsyncmirror.mailer.smtplib.SMTP_SSL")
    def test_send_secure(self, mock_smtp_ssl, email_config):
        """Secure mailers use implicit TLS and log in."""
        smtp = MagicMock()
        mock_smtp_ssl.return_value.__enter__.return_value = smtp

        Mailer(email_config, "example.org").send("PASS", "body")

        mock_smtp_ssl.assert_called_once_with("smtp.example.org", 465, timeout=30.0)
        smtp.login.assert_called_once_with("mirror@example.org", "secret")
        smtp.send_message.assert_called_once()

    @pytest.fixture
    def plain_config(self):
        """Mail settings for a submission port without implicit TLS."""
        return EmailConfig(
            mailer=MailerConfig(
                host="smtp.example.org",
                port=587,
                username="u",
                password="p",
                secure=False,
            ),
            recipients=("a@example.org",),
        )

    @patch("rsyncmirror.mailer.smtplib.SMTP")
    def test_send_plain_upgrades_with_starttls(self, mock_smtp, plain_config):
        """Insecure mailers switch to TLS before logging in when offered."""
        smtp = MagicMock()
        smtp.has_extn.return_value = True
        mock_smtp.return_value.__enter__.return_value = smtp

        Mailer(plain_config, "example.org").send("FAIL", "body")

        mock_smtp.assert_called_once_with("smtp.example.org", 587, timeout=30.0)
        smtp.has_extn.assert_called_once_with("starttls")
        smtp.starttls.assert_called_once_with()
        call_names = [c[0] for c in smtp.method_calls]
        assert call_names.index("starttls") < call_names.index("login")
        smtp.login.assert_called_once_with("u", "p")
        smtp.send_message.assert_called_once()

    @patch("rsyncmirror.mailer.smtplib.SMTP")
    def test_send_plain_without_starttls(self, mock_smtp, plain_config, caplog):
        """Servers without STARTTLS are used as they are, with a warning."""
        smtp = MagicMock()
        smtp.has_extn.return_value = False
        mock_smtp.return_value.__enter__.return_value = smtp

        Mailer(plain_config, "example.org").send("FAIL", "body")

        smtp.starttls.assert_not_called()
        smtp.login.assert_called_once_with("u", "p")
        smtp.send_message.assert_called_once()
        assert "does not offer STARTTLS" in caplog.text

    @patch("rsyncmirror.mailer.smtplib.SMTP_SSL")
    def test_skip_sending(self, mock_smtp_ssl, email_config):
        """skip_sending logs the mail without connecting."""
        Mailer(email_config, "example.org", skip_sending=True).send("PASS", "body")

        mock_smtp_ssl.assert_not_called()

    @patch("rsyncmirror.mailer.smtplib.SMTP_SSL")
    def test_smtp_failure(self, mock_smtp_ssl, email_config):
        """SMTP errors become MirrorMailError."""
        mock_smtp_ssl.side_effect = smtplib.SMTPConnectError(421, "unavailable")

        with pytest.raises(MirrorMailError, match="smtp.example.org"):
            Mailer(email_config, "example.org").send("PASS", "body")

    @patch("rsyncmirror.mailer.smtplib.SMTP_SSL")
    def test_connection_refused(self, mock_smtp_ssl, email_config):
        """Socket errors become MirrorMailError."""
        mock_smtp_ssl.side_effect = ConnectionRefusedError()

        with pytest.raises(MirrorMailError):
            Mailer(email_config, "example.org").send("PASS", "body")
