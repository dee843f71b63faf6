"""
Access Control Projection

Current authority and evaluator set, folded from the 'access-control' stream.
"""

from typing import Any

from public_tender.access.models import AccessSnapshot
from public_tender.kernel.events import Event


class AccessControlList:
    """
    Role registry projection

    Rebuilt from AuthorityAssigned, AuthorityTransferred, AuthorityRenounced,
    EvaluatorAdded and EvaluatorRemoved events.
    """

    def __init__(self) -> None:
        self.authority: str | None = None
        # dict keeps insertion order for listing
        self.evaluators: dict[str, dict[str, Any]] = {}
        self.initialized = False
        self.version = 0

    def apply_event(self, event: Event) -> None:
        """Apply event to update projection"""
        payload = event.payload
        if event.event_type == "AuthorityAssigned":
            self.authority = payload["authority"]
            self.initialized = True
        elif event.event_type == "AuthorityTransferred":
            self.authority = payload["new_authority"]
        elif event.event_type == "AuthorityRenounced":
            self.authority = None
        elif event.event_type == "EvaluatorAdded":
            self.evaluators[payload["address"]] = {
                "address": payload["address"],
                "added_at": payload["added_at"],
                "added_by": payload["added_by"],
            }
        elif event.event_type == "EvaluatorRemoved":
            self.evaluators.pop(payload["address"], None)
        else:
            return
        self.version = event.version

    def is_authority(self, identity: str | None) -> bool:
        return self.authority is not None and identity == self.authority

    def is_evaluator(self, identity: str | None) -> bool:
        return identity is not None and identity in self.evaluators

    def list_evaluators(self) -> list[str]:
        return list(self.evaluators)

    def snapshot(self) -> AccessSnapshot:
        return AccessSnapshot(authority=self.authority, evaluators=self.list_evaluators())
