"""
Test suite for the document status state machine.

System role: Verification of document lifecycle rules
"""

import pytest

from docchat.boundary.db.models.document_model import DocumentStatus
from docchat.core.document_state import can_transition, ensure_appendable, ensure_transition
from docchat.core.exceptions import ConflictError, InvalidTransitionError

S = DocumentStatus


class TestCanTransition:
    """Allowed and forbidden status changes."""

    @pytest.mark.parametrize(
        "current, target",
        [
            (S.PENDING, S.UPLOADING),
            (S.UPLOADING, S.UPLOADING),
            (S.UPLOADING, S.PROCESSING),
            (S.UPLOADING, S.FAILED),
            (S.PROCESSING, S.READY),
            (S.PROCESSING, S.FAILED),
        ],
    )
    def test_can_transition_should_allow_lifecycle_steps(self, current, target) -> None:
        assert can_transition(current, target)

    @pytest.mark.parametrize(
        "current, target",
        [
            (S.PENDING, S.PROCESSING),
            (S.UPLOADING, S.READY),
            (S.PROCESSING, S.PROCESSING),
            (S.READY, S.FAILED),
            (S.FAILED, S.PENDING),
            (S.FAILED, S.UPLOADING),
            (S.FAILED, S.PROCESSING),
        ],
    )
    def test_can_transition_should_reject_other_steps(self, current, target) -> None:
        assert not can_transition(current, target)

    @pytest.mark.parametrize("terminal", [S.READY, S.FAILED])
    def test_terminal_states_should_have_no_exits(self, terminal) -> None:
        assert not any(can_transition(terminal, target) for target in S)


class TestEnsureTransition:
    """ensure_transition raises a 409 conflict."""

    def test_ensure_transition_should_raise_for_forbidden_step(self) -> None:
        with pytest.raises(InvalidTransitionError) as exc_info:
            ensure_transition("doc-1", S.READY, S.PROCESSING)

        assert exc_info.value.status_code == 409
        assert exc_info.value.details == {
            "document_id": "doc-1",
            "current": "ready",
            "target": "processing",
        }

    def test_ensure_transition_should_pass_for_allowed_step(self) -> None:
        ensure_transition("doc-1", S.UPLOADING, S.PROCESSING)


class TestEnsureAppendable:
    """Appends are only accepted while uploading."""

    def test_ensure_appendable_should_accept_uploading(self) -> None:
        ensure_appendable("doc-1", S.UPLOADING)

    @pytest.mark.parametrize("status", [S.PROCESSING, S.READY])
    def test_ensure_appendable_should_reject_after_finalize(self, status) -> None:
        with pytest.raises(ConflictError) as exc_info:
            ensure_appendable("doc-1", status)

        assert exc_info.value.message == "Upload already completed or processing"

    @pytest.mark.parametrize("status", [S.PENDING, S.FAILED])
    def test_ensure_appendable_should_reject_other_states(self, status) -> None:
        with pytest.raises(ConflictError):
            ensure_appendable("doc-1", status)
