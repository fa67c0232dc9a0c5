"""Tests for the mail and identity services."""

import logging
import smtplib
from dataclasses import replace
from unittest.mock import MagicMock, patch

import google.auth.exceptions
import pytest

from educonnect.config import get_settings
from educonnect.services.identity import GoogleIdentityVerifier, IdentityError, IdentityProviderError
from educonnect.services.mailer import MailService


@pytest.fixture(name="smtp_settings")
def smtp_settings_fixture():
    return replace(
        get_settings(),
        SMTP_HOST="smtp.test",
        SMTP_PORT=2525,
        EMAIL="noreply@educonnect.test",
        EMAIL_PASSWORD="secret",
        BASE_URL="http://app.test",
    )


class TestMailService:
    def test_disabled_mail_logs_link(self, caplog):
        service = MailService(replace(get_settings(), EMAIL="", EMAIL_PASSWORD="", BASE_URL="http://app.test"))
        assert service.enabled is False

        with caplog.at_level(logging.INFO, logger="educonnect.mail"):
            assert service.send_verification_email("a@x.com", "alice", "tok123") is True
        assert "http://app.test/verify-email/tok123" in caplog.text

    def test_sends_over_smtp(self, smtp_settings):
        service = MailService(smtp_settings)
        with patch("educonnect.services.mailer.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            assert service.send_password_reset_email("a@x.com", "alice", "tok") is True

        smtp_cls.assert_called_once_with("smtp.test", 2525, timeout=smtp_settings.MAIL_TIMEOUT_SECONDS)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("noreply@educonnect.test", "secret")
        message = server.send_message.call_args[0][0]
        assert message["To"] == "a@x.com"
        assert message["Subject"] == "Password Reset"

    def test_smtp_failure_is_reported_not_raised(self, smtp_settings):
        service = MailService(smtp_settings)
        with patch("educonnect.services.mailer.smtplib.SMTP") as smtp_cls:
            server = smtp_cls.return_value.__enter__.return_value
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")
            assert service.send_verification_email("a@x.com", "alice", "tok") is False

    def test_unreachable_server_is_reported(self, smtp_settings):
        service = MailService(smtp_settings)
        with patch("educonnect.services.mailer.smtplib.SMTP", side_effect=OSError("connection refused")):
            assert service.send_verification_email("a@x.com", "alice", "tok") is False


class TestGoogleIdentityVerifier:
    @pytest.fixture(name="verifier")
    def verifier_fixture(self):
        return GoogleIdentityVerifier(replace(get_settings(), GOOGLE_CLIENT_ID="client-id.apps.googleusercontent.com"))

    def test_valid_token(self, verifier):
        idinfo = {"sub": "1234", "email": "gina@x.com", "email_verified": True}
        with patch("google.oauth2.id_token.verify_oauth2_token", return_value=idinfo) as verify:
            identity = verifier.verify("id-token")

        assert identity.subject == "1234"
        assert identity.email == "gina@x.com"
        assert identity.email_verified is True
        assert verify.call_args[0][0] == "id-token"
        assert verify.call_args[0][2] == "client-id.apps.googleusercontent.com"

    def test_rejected_token(self, verifier):
        with patch("google.oauth2.id_token.verify_oauth2_token", side_effect=ValueError("Wrong audience")):
            with pytest.raises(IdentityError):
                verifier.verify("id-token")

    def test_missing_subject(self, verifier):
        with patch("google.oauth2.id_token.verify_oauth2_token", return_value={"email": "x@x.com"}):
            with pytest.raises(IdentityError):
                verifier.verify("id-token")

    def test_provider_unreachable(self, verifier):
        error = google.auth.exceptions.TransportError("timed out")
        with patch("google.oauth2.id_token.verify_oauth2_token", side_effect=error):
            with pytest.raises(IdentityProviderError):
                verifier.verify("id-token")

    def test_unconfigured_client_id(self):
        verifier = GoogleIdentityVerifier(replace(get_settings(), GOOGLE_CLIENT_ID=""))
        with pytest.raises(IdentityProviderError):
            verifier.verify("id-token")

    def test_provider_error_maps_to_server_error(self, client, identity_verifier):
        identity_verifier.verify = MagicMock(side_effect=IdentityProviderError("Identity provider unreachable"))
        response = client.post("/auth", json={"idToken": "tok", "username": "x", "email": "x@x.com"})
        assert response.status_code == 500
