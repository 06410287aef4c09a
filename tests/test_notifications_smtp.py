"""Unit tests for the SMTP client and address helpers."""

import smtplib
from email.message import EmailMessage
from unittest.mock import MagicMock

import pytest

from job_alerts.config.environment import EnvironmentConfig
from job_alerts.notifications.models import SMTPDeliveryError
from job_alerts.notifications.smtp_client import (
    SMTPClient,
    build_sender_address,
    validate_recipient,
)


def _message():
    message = EmailMessage()
    message["To"] = "grace@example.com"
    message["Subject"] = "Test"
    message.set_content("Hello")
    return message


def _env(port=587, user="alerts@test.com", password="secret"):
    return EnvironmentConfig(
        smtp_host="smtp.test.com", smtp_port=port, smtp_user=user, smtp_pass=password
    )


class TestSMTPClient:
    """Tests for SMTPClient.send()."""

    def test_starttls_login_and_send(self):
        smtp = MagicMock()
        factory = MagicMock(return_value=smtp)
        message = _message()

        SMTPClient(smtp_factory=factory).send(message, _env(), use_tls=True)

        factory.assert_called_once_with("smtp.test.com", 587)
        smtp.starttls.assert_called_once()
        smtp.login.assert_called_once_with("alerts@test.com", "secret")
        smtp.send_message.assert_called_once_with(message)
        smtp.quit.assert_called_once()

    def test_no_tls(self):
        smtp = MagicMock()
        SMTPClient(smtp_factory=MagicMock(return_value=smtp)).send(_message(), _env(), use_tls=False)
        smtp.starttls.assert_not_called()

    def test_implicit_tls_on_port_465(self):
        smtp = MagicMock()
        plain_factory = MagicMock()
        ssl_factory = MagicMock(return_value=smtp)

        SMTPClient(smtp_factory=plain_factory, smtp_ssl_factory=ssl_factory).send(
            _message(), _env(port=465)
        )

        plain_factory.assert_not_called()
        assert ssl_factory.call_args[0] == ("smtp.test.com", 465)
        smtp.starttls.assert_not_called()
        smtp.send_message.assert_called_once()

    def test_no_login_without_credentials(self):
        smtp = MagicMock()
        SMTPClient(smtp_factory=MagicMock(return_value=smtp)).send(
            _message(), _env(user=None, password=None)
        )
        smtp.login.assert_not_called()

    def test_smtp_error_wrapped_and_connection_closed(self):
        smtp = MagicMock()
        smtp.send_message.side_effect = smtplib.SMTPRecipientsRefused({})

        with pytest.raises(SMTPDeliveryError, match="SMTP error"):
            SMTPClient(smtp_factory=MagicMock(return_value=smtp)).send(_message(), _env())

        smtp.quit.assert_called_once()

    def test_network_error_wrapped(self):
        factory = MagicMock(side_effect=ConnectionRefusedError("refused"))

        with pytest.raises(SMTPDeliveryError, match="Network error"):
            SMTPClient(smtp_factory=factory).send(_message(), _env())

    def test_error_on_quit_is_ignored(self):
        smtp = MagicMock()
        smtp.quit.side_effect = smtplib.SMTPServerDisconnected("gone")

        SMTPClient(smtp_factory=MagicMock(return_value=smtp)).send(_message(), _env())

        smtp.send_message.assert_called_once()


class TestValidateRecipient:
    def test_valid_address_normalized(self):
        assert validate_recipient("  grace@Example.COM ") == "grace@example.com"

    @pytest.mark.parametrize("address", [None, "", "   ", "not-an-address", "grace@"])
    def test_invalid_address(self, address):
        with pytest.raises(ValueError):
            validate_recipient(address)


class TestBuildSenderAddress:
    def test_uses_smtp_user(self):
        assert build_sender_address(_env()) == "Job Portal Alerts <alerts@test.com>"

    def test_falls_back_to_noreply(self):
        env = _env(user=None, password=None)
        env.smtp_sender_name = "Alerts"
        assert build_sender_address(env) == "Alerts <noreply@smtp.test.com>"
