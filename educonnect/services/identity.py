"""Federated identity verification against Google ID tokens."""

import logging
from dataclasses import dataclass
from threading import RLock

import google.auth.exceptions
import google.auth.transport.requests
import google.oauth2.id_token
import requests

from educonnect.config import Settings, get_settings

logger = logging.getLogger("educonnect.identity")


class IdentityError(Exception):
    """The identity assertion was rejected."""


class IdentityProviderError(Exception):
    """The identity provider could not be reached."""


@dataclass(frozen=True)
class FederatedIdentity:
    """Claims extracted from a verified identity assertion."""

    subject: str
    email: str | None = None
    email_verified: bool = False


class _TimeoutRequest(google.auth.transport.requests.Request):
    """Transport request that applies a default timeout to certificate fetches."""

    def __init__(self, session: requests.Session, timeout: float) -> None:
        super().__init__(session=session)
        self._timeout = timeout

    def __call__(self, url, method="GET", body=None, headers=None, timeout=None, **kwargs):
        return super().__call__(
            url, method=method, body=body, headers=headers, timeout=timeout or self._timeout, **kwargs
        )


class GoogleIdentityVerifier:
    """Validates Google ID tokens for the configured OAuth client id."""

    def __init__(self, settings: Settings) -> None:
        self.client_id = settings.GOOGLE_CLIENT_ID
        self.timeout = settings.IDENTITY_TIMEOUT_SECONDS
        self._session: requests.Session | None = None
        self._lock = RLock()

    def _request(self) -> _TimeoutRequest:
        with self._lock:
            if self._session is None:
                self._session = requests.Session()
            return _TimeoutRequest(self._session, self.timeout)

    def verify(self, assertion: str) -> FederatedIdentity:
        """Verify an ID token and return the stable subject.

        Raises:
            IdentityError: the token is invalid, expired or for another audience.
            IdentityProviderError: Google's certificates could not be fetched.
        """
        if not self.client_id:
            raise IdentityProviderError("GOOGLE_CLIENT_ID is not configured")

        try:
            idinfo = google.oauth2.id_token.verify_oauth2_token(assertion, self._request(), self.client_id)
        except google.auth.exceptions.TransportError as e:
            logger.error("Identity provider unreachable: %s", e)
            raise IdentityProviderError("Identity provider unreachable") from e
        except (ValueError, google.auth.exceptions.GoogleAuthError) as e:
            logger.info("Identity assertion rejected: %s", e)
            raise IdentityError("Invalid identity token") from e

        subject = idinfo.get("sub")
        if not subject:
            raise IdentityError("Identity token has no subject")
        return FederatedIdentity(
            subject=str(subject),
            email=idinfo.get("email"),
            email_verified=bool(idinfo.get("email_verified", False)),
        )


_identity_verifier: GoogleIdentityVerifier | None = None


def get_identity_verifier() -> GoogleIdentityVerifier:
    """Get singleton identity verifier instance."""
    global _identity_verifier
    if _identity_verifier is None:
        _identity_verifier = GoogleIdentityVerifier(get_settings())
    return _identity_verifier
