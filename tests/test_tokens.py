"""Tests for the JWT token service."""

from dataclasses import replace
from datetime import datetime, timedelta, timezone

import pytest

from educonnect.config import ConfigError, get_settings
from educonnect.services.jwt import (
    RESET_PASSWORD,
    SESSION,
    ExpiredTokenError,
    InvalidSignatureError,
    JWTService,
    MalformedTokenError,
)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture(name="clock")
def clock_fixture() -> FrozenClock:
    return FrozenClock(datetime.now(timezone.utc).replace(microsecond=0))


@pytest.fixture(name="jwt_service")
def jwt_service_fixture(clock: FrozenClock) -> JWTService:
    return JWTService(get_settings(), clock=clock)


class TestIssue:
    def test_claims_round_trip(self, jwt_service: JWTService, clock: FrozenClock):
        token = jwt_service.issue(42, "student", "alice")
        claims = jwt_service.verify(token)
        assert claims.subject_id == 42
        assert claims.role == "student"
        assert claims.username == "alice"
        assert claims.purpose == SESSION
        assert claims.issued_at == clock.now
        assert claims.expires_at == clock.now + timedelta(days=1)

    def test_missing_secret_raises_config_error(self):
        settings = replace(get_settings(), JWT_SECRET_KEY="")
        with pytest.raises(ConfigError):
            JWTService(settings).issue(1, "student", "alice")


class TestExpiry:
    def test_session_token_accepted_before_one_day(self, jwt_service: JWTService, clock: FrozenClock):
        token = jwt_service.issue(1, "student", "alice")
        clock.now += timedelta(hours=23)
        assert jwt_service.verify(token).subject_id == 1

    def test_session_token_rejected_after_one_day(self, jwt_service: JWTService, clock: FrozenClock):
        token = jwt_service.issue(1, "student", "alice")
        clock.now += timedelta(hours=25)
        with pytest.raises(ExpiredTokenError):
            jwt_service.verify(token)

    def test_email_tokens_last_one_hour(self, jwt_service: JWTService, clock: FrozenClock):
        token = jwt_service.issue(1, "student", "alice", ttl=jwt_service.email_ttl, purpose=RESET_PASSWORD)
        clock.now += timedelta(minutes=59)
        assert jwt_service.verify(token, RESET_PASSWORD).purpose == RESET_PASSWORD
        clock.now += timedelta(minutes=2)
        with pytest.raises(ExpiredTokenError):
            jwt_service.verify(token, RESET_PASSWORD)

    def test_decode_token_returns_none_when_expired(self, jwt_service: JWTService, clock: FrozenClock):
        token = jwt_service.issue(1, "student", "alice")
        clock.now += timedelta(days=2)
        assert jwt_service.decode_token(token) is None


class TestTampering:
    def test_foreign_secret_is_invalid_signature(self, jwt_service: JWTService, clock: FrozenClock):
        other = JWTService(replace(get_settings(), JWT_SECRET_KEY="someone-else"), clock=clock)
        token = other.issue(1, "admin", "mallory")
        with pytest.raises(InvalidSignatureError):
            jwt_service.verify(token)

    def test_swapped_payload_is_invalid_signature(self, jwt_service: JWTService):
        student = jwt_service.issue(1, "student", "alice")
        admin = jwt_service.issue(1, "admin", "alice")
        header, _, signature = student.split(".")
        forged = ".".join([header, admin.split(".")[1], signature])
        with pytest.raises(InvalidSignatureError):
            jwt_service.verify(forged)

    def test_garbage_is_malformed(self, jwt_service: JWTService):
        with pytest.raises(MalformedTokenError):
            jwt_service.verify("not-a-token")

    def test_purpose_mismatch_is_rejected(self, jwt_service: JWTService):
        token = jwt_service.issue(1, "student", "alice", purpose=RESET_PASSWORD)
        with pytest.raises(InvalidSignatureError):
            jwt_service.verify(token, SESSION)
