"""Transactional email delivery over SMTP."""

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from educonnect.config import Settings, get_settings

logger = logging.getLogger("educonnect.mail")


class MailService:
    """Sends verification and password reset mail.

    Sending never raises: failures are logged and reported as ``False`` so a
    mail problem cannot fail the request that queued it. When no SMTP
    credentials are configured the link is logged instead.
    """

    def __init__(self, settings: Settings) -> None:
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.username = settings.EMAIL
        self.password = settings.EMAIL_PASSWORD
        self.timeout = settings.MAIL_TIMEOUT_SECONDS
        self.base_url = settings.BASE_URL
        self.enabled = bool(self.smtp_host and self.username and self.password)

    def verification_url(self, token: str) -> str:
        return f"{self.base_url}/verify-email/{token}"

    def reset_url(self, token: str) -> str:
        return f"{self.base_url}/reset-password/{token}"

    def send_verification_email(self, to_email: str, username: str, token: str) -> bool:
        """Send the email verification link."""
        url = self.verification_url(token)
        if not self.enabled:
            logger.info("EMAIL VERIFICATION for %s: %s", to_email, url)
            return True

        html_body = f"""
        <p>Hi {username}, thank you for registering on our platform.</p>
        <p>Please click the link below to verify your email address:</p>
        <a href="{url}" target="_blank">Click here to verify your account</a>
        <p>This link expires in one hour. If you did not request this, please ignore this email.</p>
        """
        text_body = f"Hi {username},\n\nVerify your email address: {url}\n\nThis link expires in one hour.\n"
        return self._send_email(to_email, "Email Verification", html_body, text_body)

    def send_password_reset_email(self, to_email: str, username: str, token: str) -> bool:
        """Send the password reset link."""
        url = self.reset_url(token)
        if not self.enabled:
            logger.info("PASSWORD RESET for %s: %s", to_email, url)
            return True

        html_body = f"""
        <p>Hi {username},</p>
        <p>We received a request to reset your password. Click the link below to choose a new one:</p>
        <a href="{url}" target="_blank">Reset your password</a>
        <p>This link expires in one hour. If you did not request a reset, you can ignore this email.</p>
        """
        text_body = f"Hi {username},\n\nReset your password: {url}\n\nThis link expires in one hour.\n"
        return self._send_email(to_email, "Password Reset", html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = self.username
        msg["To"] = to_email
        msg.attach(MIMEText(text_body, "plain", "utf-8"))
        msg.attach(MIMEText(html_body, "html", "utf-8"))

        try:
            with smtplib.SMTP(self.smtp_host, self.smtp_port, timeout=self.timeout) as server:
                server.starttls()
                server.login(self.username, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError):
            logger.exception("Failed to send '%s' email to %s", subject, to_email)
            return False

        logger.info("Sent '%s' email to %s", subject, to_email)
        return True


_mail_service: MailService | None = None


def get_mail_service() -> MailService:
    """Get singleton mail service instance."""
    global _mail_service
    if _mail_service is None:
        _mail_service = MailService(get_settings())
    return _mail_service
