"""
Access Control Command Handlers

Transform role-change commands into events. Handlers never mutate state:
they validate against the projection passed in and return the events to
append. The caller appends them and folds them into the projection.
"""

from typing import Any

from public_tender.access import commands, events, invariants
from public_tender.access.models import Operation
from public_tender.access.projections import AccessControlList
from public_tender.kernel.events import Event, create_event
from public_tender.kernel.ids import ACCESS_CONTROL_STREAM, generate_id
from public_tender.kernel.time import TimeProvider


class AccessControlHandlers:
    """Command handlers for the authority and evaluator roles"""

    def __init__(self, time_provider: TimeProvider) -> None:
        self.time_provider = time_provider

    def _emit(
        self,
        acl: AccessControlList,
        event_type: str,
        payload: dict[str, Any],
        command_id: str,
        actor_id: str | None,
    ) -> list[Event]:
        return [
            create_event(
                event_id=generate_id(),
                event_type=event_type,
                stream_id=ACCESS_CONTROL_STREAM,
                stream_type="AccessControl",
                occurred_at=self.time_provider.now(),
                actor_id=actor_id,
                command_id=command_id,
                payload=payload,
                version=acl.version + 1,
            )
        ]

    def handle_assign_authority(
        self, authority: str, command_id: str, acl: AccessControlList
    ) -> list[Event]:
        """
        Record the initial authority of a fresh database

        Returns an empty list when the database already has one.
        """
        if acl.initialized:
            return []
        authority = invariants.validate_address(authority, "authority")
        payload = events.AuthorityAssigned(
            authority=authority,
            assigned_at=self.time_provider.now(),
        ).model_dump(mode="json")
        return self._emit(acl, "AuthorityAssigned", payload, command_id, None)

    def handle_add_evaluator(
        self,
        command: commands.AddEvaluator,
        command_id: str,
        caller: str,
        acl: AccessControlList,
    ) -> list[Event]:
        invariants.authorize(acl, caller, Operation.ADD_EVALUATOR)
        address = invariants.validate_address(command.address)
        invariants.validate_evaluator_addable(acl, address)

        payload = events.EvaluatorAdded(
            address=address,
            added_at=self.time_provider.now(),
            added_by=caller,
        ).model_dump(mode="json")
        return self._emit(acl, "EvaluatorAdded", payload, command_id, caller)

    def handle_remove_evaluator(
        self,
        command: commands.RemoveEvaluator,
        command_id: str,
        caller: str,
        acl: AccessControlList,
    ) -> list[Event]:
        invariants.authorize(acl, caller, Operation.REMOVE_EVALUATOR)
        address = invariants.validate_address(command.address)
        invariants.validate_evaluator_removable(acl, address)

        payload = events.EvaluatorRemoved(
            address=address,
            removed_at=self.time_provider.now(),
            removed_by=caller,
        ).model_dump(mode="json")
        return self._emit(acl, "EvaluatorRemoved", payload, command_id, caller)

    def handle_transfer_authority(
        self,
        command: commands.TransferAuthority,
        command_id: str,
        caller: str,
        acl: AccessControlList,
    ) -> list[Event]:
        """
        Move the authority role to a new identity

        Tenders keep their recorded creator; only future authority
        operations are affected.
        """
        invariants.authorize(acl, caller, Operation.TRANSFER_AUTHORITY)
        new_authority = invariants.validate_address(command.new_authority, "new_authority")

        payload = events.AuthorityTransferred(
            previous_authority=caller,
            new_authority=new_authority,
            transferred_at=self.time_provider.now(),
        ).model_dump(mode="json")
        return self._emit(acl, "AuthorityTransferred", payload, command_id, caller)

    def handle_renounce_authority(
        self,
        command: commands.RenounceAuthority,
        command_id: str,
        caller: str,
        acl: AccessControlList,
    ) -> list[Event]:
        invariants.authorize(acl, caller, Operation.RENOUNCE_AUTHORITY)

        payload = events.AuthorityRenounced(
            previous_authority=caller,
            renounced_at=self.time_provider.now(),
        ).model_dump(mode="json")
        return self._emit(acl, "AuthorityRenounced", payload, command_id, caller)
