"""
Tests for access control: authorization check, role handlers, projection

Handlers are exercised directly against an AccessControlList so each test
sees exactly which events a command produces.
"""

import pytest

from public_tender.access.commands import (
    AddEvaluator,
    RemoveEvaluator,
    RenounceAuthority,
    TransferAuthority,
)
from public_tender.access.handlers import AccessControlHandlers
from public_tender.access.invariants import authorize, validate_address
from public_tender.access.models import REQUIRED_ROLES, Operation, Role
from public_tender.access.projections import AccessControlList
from public_tender.kernel.errors import (
    AlreadyExists,
    EvaluatorNotFound,
    InvalidInput,
    Unauthorized,
)
from tests.helpers import AUTHORITY, EVALUATOR, apply_all


# =============================================================================
# authorize()
# =============================================================================


class TestAuthorize:
    @pytest.mark.parametrize(
        "operation",
        [op for op, role in REQUIRED_ROLES.items() if role is Role.AUTHORITY],
    )
    def test_authority_operations(self, acl: AccessControlList, operation: Operation) -> None:
        authorize(acl, AUTHORITY, operation)
        with pytest.raises(Unauthorized):
            authorize(acl, EVALUATOR, operation)
        with pytest.raises(Unauthorized):
            authorize(acl, "provider-a", operation)

    def test_evaluate_offer_needs_evaluator(self, acl: AccessControlList) -> None:
        authorize(acl, EVALUATOR, Operation.EVALUATE_OFFER)
        with pytest.raises(Unauthorized) as exc_info:
            authorize(acl, AUTHORITY, Operation.EVALUATE_OFFER)
        assert "evaluator" in exc_info.value.reason
        assert exc_info.value.operation == "evaluate_offer"

    def test_submit_offer_open_to_anyone(self, acl: AccessControlList) -> None:
        authorize(acl, "provider-a", Operation.SUBMIT_OFFER)
        authorize(acl, AUTHORITY, Operation.SUBMIT_OFFER)

    def test_anonymous_caller_rejected(self, acl: AccessControlList) -> None:
        with pytest.raises(Unauthorized):
            authorize(acl, "", Operation.SUBMIT_OFFER)
        with pytest.raises(Unauthorized):
            authorize(acl, None, Operation.CREATE_TENDER)

    def test_every_operation_has_a_role(self) -> None:
        assert set(REQUIRED_ROLES) == set(Operation)


def test_validate_address_rejects_blank_and_padded() -> None:
    assert validate_address("eva") == "eva"
    with pytest.raises(InvalidInput):
        validate_address("  eva ")
    with pytest.raises(InvalidInput):
        validate_address("   ")
    with pytest.raises(InvalidInput):
        validate_address(None)


# =============================================================================
# Handlers
# =============================================================================


class TestAssignAuthority:
    def test_fresh_list_gets_authority(self, access_handlers: AccessControlHandlers) -> None:
        acl = AccessControlList()
        events = access_handlers.handle_assign_authority(AUTHORITY, "cmd-1", acl)

        assert [e.event_type for e in events] == ["AuthorityAssigned"]
        assert events[0].stream_id == "access-control"
        assert events[0].version == 1

        apply_all(acl, events)
        assert acl.authority == AUTHORITY
        assert acl.initialized

    def test_initialized_list_is_left_alone(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        assert access_handlers.handle_assign_authority("someone-else", "cmd-2", acl) == []
        assert acl.authority == AUTHORITY


class TestEvaluatorManagement:
    def test_add_evaluator(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        events = access_handlers.handle_add_evaluator(
            AddEvaluator(address="bob"), "cmd-1", AUTHORITY, acl
        )
        assert events[0].event_type == "EvaluatorAdded"
        assert events[0].payload["added_by"] == AUTHORITY
        assert events[0].version == acl.version + 1

        apply_all(acl, events)
        assert acl.list_evaluators() == [EVALUATOR, "bob"]
        assert acl.is_evaluator("bob")

    def test_add_duplicate_evaluator(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        with pytest.raises(AlreadyExists):
            access_handlers.handle_add_evaluator(
                AddEvaluator(address=EVALUATOR), "cmd-1", AUTHORITY, acl
            )

    def test_add_blank_evaluator(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        with pytest.raises(InvalidInput):
            access_handlers.handle_add_evaluator(
                AddEvaluator(address=" "), "cmd-1", AUTHORITY, acl
            )

    def test_only_authority_adds_evaluators(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        with pytest.raises(Unauthorized):
            access_handlers.handle_add_evaluator(
                AddEvaluator(address="bob"), "cmd-1", EVALUATOR, acl
            )

    def test_remove_evaluator(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        apply_all(
            acl,
            access_handlers.handle_remove_evaluator(
                RemoveEvaluator(address=EVALUATOR), "cmd-1", AUTHORITY, acl
            ),
        )
        assert not acl.is_evaluator(EVALUATOR)
        assert acl.list_evaluators() == []

    def test_remove_unknown_evaluator(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        with pytest.raises(EvaluatorNotFound):
            access_handlers.handle_remove_evaluator(
                RemoveEvaluator(address="nobody"), "cmd-1", AUTHORITY, acl
            )


class TestAuthorityChanges:
    def test_transfer_authority(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        events = access_handlers.handle_transfer_authority(
            TransferAuthority(new_authority="council"), "cmd-1", AUTHORITY, acl
        )
        assert events[0].payload["previous_authority"] == AUTHORITY
        apply_all(acl, events)

        assert acl.authority == "council"
        authorize(acl, "council", Operation.CREATE_TENDER)
        with pytest.raises(Unauthorized):
            authorize(acl, AUTHORITY, Operation.CREATE_TENDER)

    def test_transfer_to_blank_identity(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        with pytest.raises(InvalidInput):
            access_handlers.handle_transfer_authority(
                TransferAuthority(new_authority=""), "cmd-1", AUTHORITY, acl
            )

    def test_renounce_leaves_no_authority(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        apply_all(
            acl,
            access_handlers.handle_renounce_authority(
                RenounceAuthority(), "cmd-1", AUTHORITY, acl
            ),
        )
        assert acl.authority is None
        for operation, role in REQUIRED_ROLES.items():
            if role is Role.AUTHORITY:
                with pytest.raises(Unauthorized):
                    authorize(acl, AUTHORITY, operation)

    def test_evaluator_cannot_renounce(
        self, access_handlers: AccessControlHandlers, acl: AccessControlList
    ) -> None:
        with pytest.raises(Unauthorized):
            access_handlers.handle_renounce_authority(
                RenounceAuthority(), "cmd-1", EVALUATOR, acl
            )


def test_projection_rebuild_matches(
    access_handlers: AccessControlHandlers, acl: AccessControlList
) -> None:
    """Replaying the same events yields the same role state"""
    log = []
    fresh = AccessControlList()
    log += apply_all(fresh, access_handlers.handle_assign_authority(AUTHORITY, "c1", fresh))
    log += apply_all(
        fresh,
        access_handlers.handle_add_evaluator(AddEvaluator(address="x"), "c2", AUTHORITY, fresh),
    )
    log += apply_all(
        fresh,
        access_handlers.handle_transfer_authority(
            TransferAuthority(new_authority="y"), "c3", AUTHORITY, fresh
        ),
    )

    replayed = AccessControlList()
    apply_all(replayed, log)

    assert replayed.snapshot() == fresh.snapshot()
    assert replayed.version == fresh.version == 3
