"""
Signed upload tickets.

A ticket is a self-contained capability: base64url(JSON payload) + "." +
hex HMAC-SHA256 of the encoded payload under a server secret. No server
side table is consulted; the token itself is the authorization state.

Dependencies: hmac, hashlib, pydantic, docchat.core.exceptions
System role: Upload authorization for chunk append and finalize
"""

import base64
import hashlib
import hmac
import json
import logging
import secrets
import time
from typing import Callable
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from docchat.core.exceptions import InvalidTokenError, TokenExpiredError

logger = logging.getLogger(__name__)

NONCE_BYTES = 12


class UploadTicket(BaseModel):
    """
    Verified ticket payload.

    Attributes:
        document_id: Document the ticket may write to
        session_id: Session owning that document
        nonce: Random hex string, also keys the temp file
        expires_at: Unix timestamp (seconds) after which the ticket is rejected
    """

    model_config = ConfigDict(frozen=True)

    document_id: UUID
    session_id: UUID
    nonce: str = Field(min_length=1)
    expires_at: int


def _b64url_encode(raw: bytes) -> str:
    return base64.urlsafe_b64encode(raw).rstrip(b"=").decode("ascii")


def _b64url_decode(text: str) -> bytes:
    padding = "=" * (-len(text) % 4)
    return base64.urlsafe_b64decode(text + padding)


class UploadTokenSigner:
    """
    Issues and verifies upload tickets.

    Malformed tokens, bad signatures and expired tickets all raise an
    AuthError subclass with the same public message; only the logs tell
    them apart.
    """

    def __init__(
        self,
        secret: str,
        ttl_seconds: int = 3600,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Args:
            secret: HMAC key
            ttl_seconds: Ticket lifetime from issuance
            clock: Time source returning unix seconds (injectable for tests)
        """
        if not secret:
            raise ValueError("Upload secret must not be empty")
        self._key = secret.encode("utf-8")
        self._ttl_seconds = ttl_seconds
        self._clock = clock

    def _sign(self, encoded: str) -> str:
        return hmac.new(self._key, encoded.encode("ascii"), hashlib.sha256).hexdigest()

    def issue(self, document_id: UUID, session_id: UUID) -> tuple[str, UploadTicket]:
        """
        Create a signed ticket for one document upload.

        Args:
            document_id: Document receiving the upload
            session_id: Session owning the document

        Returns:
            (token, ticket payload)
        """
        ticket = UploadTicket(
            document_id=document_id,
            session_id=session_id,
            nonce=secrets.token_hex(NONCE_BYTES),
            expires_at=int(self._clock()) + self._ttl_seconds,
        )
        payload = {
            "document_id": str(ticket.document_id),
            "session_id": str(ticket.session_id),
            "nonce": ticket.nonce,
            "exp": ticket.expires_at,
        }
        encoded = _b64url_encode(json.dumps(payload, separators=(",", ":")).encode("utf-8"))
        return f"{encoded}.{self._sign(encoded)}", ticket

    def verify(self, token: str) -> UploadTicket:
        """
        Verify a token and return its payload.

        Args:
            token: Token produced by issue()

        Returns:
            UploadTicket: Decoded payload

        Raises:
            InvalidTokenError: Malformed token or signature mismatch
            TokenExpiredError: Signature valid but ticket expired
        """
        encoded, _, signature = (token or "").partition(".")
        if not encoded or not signature:
            logger.warning(f"{__name__}:verify - Rejected malformed token")
            raise InvalidTokenError("malformed")

        expected = self._sign(encoded)
        if not hmac.compare_digest(expected.encode("ascii"), signature.encode("ascii", "replace")):
            logger.warning(f"{__name__}:verify - Rejected token with bad signature")
            raise InvalidTokenError("signature")

        try:
            payload = json.loads(_b64url_decode(encoded))
            ticket = UploadTicket(
                document_id=payload["document_id"],
                session_id=payload["session_id"],
                nonce=payload["nonce"],
                expires_at=payload["exp"],
            )
        except (ValueError, TypeError, KeyError, PydanticValidationError) as e:
            logger.warning(f"{__name__}:verify - Rejected undecodable payload: {type(e).__name__}")
            raise InvalidTokenError("payload") from e

        if ticket.expires_at < int(self._clock()):
            logger.warning(
                f"{__name__}:verify - Rejected expired token for document_id={ticket.document_id}"
            )
            raise TokenExpiredError(ticket.expires_at)

        return ticket
