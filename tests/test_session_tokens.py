import pytest

from chirpy.auth.session_tokens import SessionTokenIssuer
from chirpy.utils.exceptions import (
    ConfigError,
    InvalidSignatureError,
    InvalidTokenError,
    MalformedTokenError,
    TokenExpiredError,
    ValidationError,
)

from .conftest import TEST_SECRET


@pytest.fixture
def issuer(clock):
    return SessionTokenIssuer(TEST_SECRET, default_ttl=3600, clock=clock)


def test_issue_and_verify(issuer):
    token = issuer.issue(7)
    assert issuer.verify(token) == 7


def test_effective_ttl(issuer):
    assert issuer.effective_ttl(None) == 3600
    assert issuer.effective_ttl(0) == 3600
    assert issuer.effective_ttl(60) == 60
    assert issuer.effective_ttl(10_000) == 3600
    with pytest.raises(ValidationError):
        issuer.effective_ttl(-5)


def test_zero_ttl_uses_default(issuer, clock):
    token = issuer.issue(1, requested_ttl=0)
    clock.advance(seconds=3600)
    assert issuer.verify(token) == 1
    clock.advance(seconds=1)
    with pytest.raises(TokenExpiredError):
        issuer.verify(token)


def test_expires_exactly_after_ttl(issuer, clock):
    token = issuer.issue(1, requested_ttl=30)
    clock.advance(seconds=30)
    assert issuer.verify(token) == 1
    clock.advance(microseconds=1)
    with pytest.raises(TokenExpiredError):
        issuer.verify(token)


def test_tampered_token_fails_signature(issuer):
    token = issuer.issue(1)
    payload, signature = token.rsplit(".", 1)
    forged = payload + "." + ("A" if signature[0] != "A" else "B") + signature[1:]
    with pytest.raises(InvalidSignatureError):
        issuer.verify(forged)


def test_token_from_other_secret_is_rejected(issuer, clock):
    other = SessionTokenIssuer("another-secret", clock=clock)
    with pytest.raises(InvalidSignatureError):
        issuer.verify(other.issue(1))


def test_token_from_other_issuer_name_is_rejected(issuer, clock):
    other = SessionTokenIssuer(TEST_SECRET, issuer="someone-else", clock=clock)
    with pytest.raises(InvalidTokenError):
        issuer.verify(other.issue(1))


@pytest.mark.parametrize("token", ["", "garbage", None])
def test_malformed_tokens(issuer, token):
    with pytest.raises(MalformedTokenError):
        issuer.verify(token)


def test_signed_payload_without_claims_is_malformed(issuer):
    token = issuer._serializer.dumps({"sub": "1"})
    with pytest.raises(MalformedTokenError):
        issuer.verify(token)


def test_secret_is_required():
    with pytest.raises(ConfigError):
        SessionTokenIssuer("")


def test_token_issued_mid_second_lives_its_full_ttl(issuer, clock):
    clock.advance(microseconds=900_000)
    token = issuer.issue(3, requested_ttl=30)
    clock.advance(seconds=29, microseconds=500_000)
    assert issuer.verify(token) == 3
    clock.advance(seconds=1)
    with pytest.raises(TokenExpiredError):
        issuer.verify(token)
