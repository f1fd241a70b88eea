"""
Test suite for UploadTokenSigner.

Covers ticket round trip, tampering, malformed input and expiry, and
that every rejection surfaces as the same public error.

System role: Verification of upload authorization
"""

import uuid

import pytest

from docchat.core.exceptions import AuthError, InvalidTokenError, TokenExpiredError
from docchat.core.upload_tokens import UploadTokenSigner


class FakeClock:
    """Controllable time source."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def signer(clock: FakeClock) -> UploadTokenSigner:
    return UploadTokenSigner("test-secret", ttl_seconds=3600, clock=clock)


class TestIssueAndVerify:
    """Round trip of issue() and verify()."""

    def test_verify_should_return_original_ids(self, signer: UploadTokenSigner) -> None:
        # Arrange
        document_id, session_id = uuid.uuid4(), uuid.uuid4()

        # Act
        token, ticket = signer.issue(document_id, session_id)
        verified = signer.verify(token)

        # Assert
        assert verified.document_id == document_id
        assert verified.session_id == session_id
        assert verified.nonce == ticket.nonce
        assert verified.expires_at == ticket.expires_at

    def test_issue_should_set_expiry_one_ttl_ahead(
        self, signer: UploadTokenSigner, clock: FakeClock
    ) -> None:
        _, ticket = signer.issue(uuid.uuid4(), uuid.uuid4())

        assert ticket.expires_at == int(clock.now) + 3600

    def test_issue_should_use_fresh_nonce_each_time(self, signer: UploadTokenSigner) -> None:
        document_id, session_id = uuid.uuid4(), uuid.uuid4()

        _, first = signer.issue(document_id, session_id)
        _, second = signer.issue(document_id, session_id)

        assert first.nonce != second.nonce


class TestVerifyRejections:
    """Every rejection is an AuthError with the same message."""

    def test_verify_should_reject_every_mutated_signature_character(
        self, signer: UploadTokenSigner
    ) -> None:
        # Arrange
        token, _ = signer.issue(uuid.uuid4(), uuid.uuid4())
        encoded, signature = token.split(".")

        # Act / Assert
        for position in range(len(signature)):
            replacement = "0" if signature[position] != "0" else "1"
            tampered = signature[:position] + replacement + signature[position + 1:]
            with pytest.raises(InvalidTokenError):
                signer.verify(f"{encoded}.{tampered}")

    def test_verify_should_reject_token_without_signature(self, signer: UploadTokenSigner) -> None:
        token, _ = signer.issue(uuid.uuid4(), uuid.uuid4())

        with pytest.raises(InvalidTokenError) as exc_info:
            signer.verify(token.split(".")[0])

        assert exc_info.value.details["reason"] == "malformed"

    @pytest.mark.parametrize("token", ["", ".", "abc.", ".abc"])
    def test_verify_should_reject_malformed_tokens(
        self, signer: UploadTokenSigner, token: str
    ) -> None:
        with pytest.raises(InvalidTokenError):
            signer.verify(token)

    def test_verify_should_reject_token_signed_with_other_secret(
        self, clock: FakeClock
    ) -> None:
        other = UploadTokenSigner("other-secret", clock=clock)
        token, _ = other.issue(uuid.uuid4(), uuid.uuid4())

        with pytest.raises(InvalidTokenError):
            UploadTokenSigner("test-secret", clock=clock).verify(token)

    def test_verify_should_reject_expired_token(
        self, signer: UploadTokenSigner, clock: FakeClock
    ) -> None:
        # Arrange
        token, ticket = signer.issue(uuid.uuid4(), uuid.uuid4())
        clock.now += 3601

        # Act / Assert
        with pytest.raises(TokenExpiredError) as exc_info:
            signer.verify(token)
        assert exc_info.value.details["expired_at"] == ticket.expires_at

    def test_verify_should_accept_token_at_exact_expiry(
        self, signer: UploadTokenSigner, clock: FakeClock
    ) -> None:
        token, _ = signer.issue(uuid.uuid4(), uuid.uuid4())
        clock.now += 3600

        assert signer.verify(token).nonce

    def test_rejections_should_share_public_message_and_status(
        self, signer: UploadTokenSigner, clock: FakeClock
    ) -> None:
        # Arrange
        token, _ = signer.issue(uuid.uuid4(), uuid.uuid4())
        errors: list[AuthError] = []

        # Act
        for bad in ("garbage", token[:-1] + ("0" if token[-1] != "0" else "1")):
            with pytest.raises(AuthError) as exc_info:
                signer.verify(bad)
            errors.append(exc_info.value)
        clock.now += 7200
        with pytest.raises(AuthError) as exc_info:
            signer.verify(token)
        errors.append(exc_info.value)

        # Assert
        assert {e.message for e in errors} == {"Invalid token"}
        assert {e.status_code for e in errors} == {401}

    def test_init_should_reject_empty_secret(self) -> None:
        with pytest.raises(ValueError):
            UploadTokenSigner("")
