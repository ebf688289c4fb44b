from __future__ import annotations

from datetime import UTC, datetime, timedelta

import jwt
import pytest

from authcore.application.services.tokens import JwtTokenService
from authcore.domain import InvariantViolation
from authcore.domain.users.exceptions import (ExpiredTokenError, InvalidSignatureError,
                                              MalformedTokenError, TokenError)
from authcore.shared.config import TokenConfig
from authcore.shared.errors import ConfigError

SECRET_A = "secret-a-0123456789abcdef0123456789abcdef"
SECRET_B = "secret-b-0123456789abcdef0123456789abcdef"
ISSUED_AT = datetime(2026, 3, 1, 12, 0, 0, tzinfo=UTC)


class FrozenClock:
    def __init__(self, now: datetime) -> None:
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture()
def clock() -> FrozenClock:
    return FrozenClock(ISSUED_AT)


@pytest.fixture()
def service(clock: FrozenClock) -> JwtTokenService:
    return JwtTokenService(TokenConfig(secret=SECRET_A), clock=clock)


def test_issue_then_validate_returns_subject(service: JwtTokenService) -> None:
    issued = service.issue("alice")

    claims = service.validate(issued.token)

    assert claims.subject == "alice"
    assert claims.issued_at == ISSUED_AT
    assert claims.expires_at == ISSUED_AT + timedelta(hours=24)
    assert issued.expires_at == claims.expires_at


def test_issued_token_is_compact_jwt_with_standard_claims(service: JwtTokenService) -> None:
    issued = service.issue("alice")

    assert issued.token.count(".") == 2
    assert jwt.get_unverified_header(issued.token)["alg"] == "HS256"
    payload = jwt.decode(issued.token, options={"verify_signature": False})
    assert payload == {
        "sub": "alice",
        "iat": int(ISSUED_AT.timestamp()),
        "exp": int((ISSUED_AT + timedelta(hours=24)).timestamp()),
    }


def test_issue_is_deterministic_for_same_instant(service: JwtTokenService) -> None:
    assert service.issue("alice").token == service.issue("alice").token


def test_issue_truncates_subsecond_clock(clock: FrozenClock, service: JwtTokenService) -> None:
    clock.now = ISSUED_AT + timedelta(microseconds=750_000)

    assert service.issue("alice").claims.issued_at == ISSUED_AT


def test_issue_refuses_empty_subject(service: JwtTokenService) -> None:
    with pytest.raises(InvariantViolation) as exc_info:
        service.issue("")

    assert exc_info.value.field == "subject"


@pytest.mark.parametrize("offset", [timedelta(0), timedelta(hours=24), timedelta(hours=24, seconds=59),
                                    timedelta(hours=24, seconds=60)])
def test_token_accepted_until_leeway_runs_out(
    clock: FrozenClock, service: JwtTokenService, offset: timedelta
) -> None:
    token = service.issue("alice").token
    clock.now = ISSUED_AT + offset

    assert service.validate(token).subject == "alice"


def test_token_expired_after_leeway(clock: FrozenClock, service: JwtTokenService) -> None:
    token = service.issue("alice").token
    clock.now = ISSUED_AT + timedelta(hours=24, seconds=61)

    with pytest.raises(ExpiredTokenError):
        service.validate(token)


def test_custom_ttl_and_leeway(clock: FrozenClock) -> None:
    service = JwtTokenService(
        TokenConfig(secret=SECRET_A, ttl_seconds=60, leeway_seconds=0), clock=clock
    )
    token = service.issue("alice").token

    clock.now = ISSUED_AT + timedelta(seconds=60)
    assert service.validate(token).subject == "alice"
    clock.now = ISSUED_AT + timedelta(seconds=61)
    with pytest.raises(ExpiredTokenError):
        service.validate(token)


def test_token_from_other_secret_has_invalid_signature(clock: FrozenClock) -> None:
    issuer = JwtTokenService(TokenConfig(secret=SECRET_A), clock=clock)
    verifier = JwtTokenService(TokenConfig(secret=SECRET_B), clock=clock)

    with pytest.raises(InvalidSignatureError):
        verifier.validate(issuer.issue("alice").token)


def test_tampered_payload_has_invalid_signature(service: JwtTokenService) -> None:
    header, _, signature = service.issue("alice").token.split(".")
    forged_payload = jwt.encode(
        {"sub": "mallory", "iat": int(ISSUED_AT.timestamp()),
         "exp": int((ISSUED_AT + timedelta(hours=24)).timestamp())},
        SECRET_B,
    ).split(".")[1]

    with pytest.raises(InvalidSignatureError):
        service.validate(f"{header}.{forged_payload}.{signature}")


def test_other_algorithm_is_rejected_as_bad_signature(clock: FrozenClock) -> None:
    hs512 = JwtTokenService(TokenConfig(secret=SECRET_A, algorithm="HS512"), clock=clock)
    hs256 = JwtTokenService(TokenConfig(secret=SECRET_A), clock=clock)

    with pytest.raises(InvalidSignatureError):
        hs256.validate(hs512.issue("alice").token)


def test_unsigned_token_is_rejected(service: JwtTokenService) -> None:
    unsigned = jwt.encode(
        {"sub": "alice", "iat": int(ISSUED_AT.timestamp()),
         "exp": int((ISSUED_AT + timedelta(hours=24)).timestamp())},
        None,
        algorithm="none",
    )

    with pytest.raises(InvalidSignatureError):
        service.validate(unsigned)


@pytest.mark.parametrize(
    "token",
    ["", "abc", "a.b", "a.b.c.d", "a.b.c", "!!!.???.###", "...."],
)
def test_garbage_is_malformed(service: JwtTokenService, token: str) -> None:
    with pytest.raises(MalformedTokenError):
        service.validate(token)


def test_truncated_token_never_leaks_unexpected_error(service: JwtTokenService) -> None:
    token = service.issue("alice").token

    for cut in (1, 5, len(token) // 2, len(token) - 1):
        with pytest.raises((MalformedTokenError, InvalidSignatureError)):
            service.validate(token[:-cut])


@pytest.mark.parametrize(
    "payload",
    [
        {"iat": 1_772_366_400, "exp": 1_772_452_800},
        {"sub": "alice", "exp": 1_772_452_800},
        {"sub": "alice", "iat": 1_772_366_400},
        {"sub": "", "iat": 1_772_366_400, "exp": 1_772_452_800},
        {"sub": "alice", "iat": "yesterday", "exp": 1_772_452_800},
        {"sub": "alice", "iat": 1_772_366_400, "exp": 1_772_366_400},
    ],
)
def test_signed_token_with_bad_claims_is_malformed(
    service: JwtTokenService, payload: dict[str, object]
) -> None:
    token = jwt.encode(payload, SECRET_A, algorithm="HS256")

    with pytest.raises(MalformedTokenError):
        service.validate(token)


def test_missing_secret_is_config_error() -> None:
    with pytest.raises(ConfigError) as exc_info:
        JwtTokenService(TokenConfig(secret=None))

    assert exc_info.value.code == "jwt_secret_missing"


def test_non_hmac_algorithm_is_refused_by_config() -> None:
    with pytest.raises(ValueError):
        TokenConfig(secret=SECRET_A, algorithm="RS256")


def test_token_errors_render_identically() -> None:
    bodies = {
        (err.status, tuple(err.to_dict().items()))
        for err in (
            MalformedTokenError("bad base64"),
            InvalidSignatureError("signature mismatch"),
            ExpiredTokenError("expired at noon"),
        )
    }

    assert bodies == {(401, (("error", "invalid_token"),))}
    assert issubclass(ExpiredTokenError, TokenError)
