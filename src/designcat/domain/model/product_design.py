"""ProductDesign aggregate, the root of the catalog.

A product design owns its ordered set of model references and its
soft-delete lifecycle.  The aggregate is immutable: every transition
returns a new ``ProductDesign`` and leaves the receiver untouched, so the
copy that was read and the copy that is about to be saved never alias.

Soft-delete lifecycle::

    Active --soft_delete--> Deleted(expires_at = deleted_at + ttl)
    Deleted --restore-----> Active
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from datetime import datetime

from designcat.domain.exceptions import (
    ForbiddenError,
    RestoreExpiredError,
    ValidationError,
)
from designcat.domain.model.policy import LifecyclePolicy
from designcat.domain.model.value_objects import ModelReference
from designcat.domain.service.reference_set_service import (
    merge_references,
    normalize_references,
)


@dataclass(frozen=True)
class ProductDesign:
    """Aggregate root for product designs.

    Use ``ProductDesign.draft()`` for new designs.  The ``__init__`` is
    kept simple so repositories can reconstitute persisted designs
    without re-validating.

    Invariants:
    - ``deleted_at`` and ``expires_at`` are either both set or both unset
    - ``references`` is canonical once the design has been persisted
    """

    id: str
    company_id: str
    product_name: str
    brand_id: str = ""
    assignee_id: str = ""
    references: tuple[ModelReference, ...] = field(default_factory=tuple)
    printed: bool = False

    created_at: datetime | None = None
    created_by: str | None = None
    updated_at: datetime | None = None
    updated_by: str | None = None

    deleted_at: datetime | None = None
    deleted_by: str | None = None
    expires_at: datetime | None = None

    version: int = 0

    # --- Factory (used for NEW designs only) ----------------------------------

    @staticmethod
    def draft(
        product_name: str,
        brand_id: str = "",
        assignee_id: str = "",
        references: Iterable[ModelReference] = (),
        created_by: str | None = None,
    ) -> ProductDesign:
        """Build an unsaved design; id and tenant are assigned on create."""
        if not product_name or not product_name.strip():
            raise ValidationError("Product name is required")

        return ProductDesign(
            id="",
            company_id="",
            product_name=product_name.strip(),
            brand_id=(brand_id or "").strip(),
            assignee_id=(assignee_id or "").strip(),
            references=tuple(normalize_references(references)),
            created_by=_clean_actor(created_by),
            updated_by=_clean_actor(created_by),
        )

    # --- Computed properties --------------------------------------------------

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def can_modify(self, policy: LifecyclePolicy) -> bool:
        return not (self.printed and policy.printed_locks_design)

    def display_orders(self) -> dict[str, int]:
        """Map each referenced model id to its display order."""
        return {ref.target_id: ref.order for ref in normalize_references(self.references)}

    # --- State transitions ----------------------------------------------------

    def revise(
        self,
        *,
        product_name: str,
        brand_id: str,
        assignee_id: str,
        references: Iterable[ModelReference],
        now: datetime,
        updated_by: str | None,
        policy: LifecyclePolicy,
    ) -> ProductDesign:
        """Replace the editable content of the design."""
        self._assert_modifiable(policy, "updated")
        if not product_name or not product_name.strip():
            raise ValidationError("Product name is required")

        revised = replace(
            self,
            product_name=product_name.strip(),
            brand_id=(brand_id or "").strip(),
            assignee_id=(assignee_id or "").strip(),
            references=tuple(normalize_references(references)),
        )
        return revised._touch(now, updated_by)

    def with_appended_references(
        self,
        append_refs: Iterable[ModelReference],
        policy: LifecyclePolicy,
    ) -> ProductDesign:
        """Merge *append_refs* after the existing references.

        Audit fields are left as they are.
        """
        self._assert_modifiable(policy, "updated")
        merged = merge_references(self.references, append_refs)
        return replace(self, references=tuple(merged))

    def mark_printed(self, now: datetime, updated_by: str | None = None) -> ProductDesign:
        """Set the printed flag.  Already-printed designs are returned as is."""
        if self.printed:
            return self
        return replace(self, printed=True)._touch(now, updated_by)

    def soft_delete(
        self,
        now: datetime,
        deleted_by: str | None,
        policy: LifecyclePolicy,
    ) -> ProductDesign:
        """Transition Active -> Deleted and start the retention window."""
        self._assert_modifiable(policy, "deleted")
        if self.is_deleted:
            raise ValidationError(f"Product design '{self.id}' is already deleted")

        # deleted_at, deleted_by and expires_at are set together
        actor = _clean_actor(deleted_by)
        if actor is None:
            raise ValidationError(
                f"Deleting member is required to delete product design '{self.id}'"
            )
        deleted = replace(
            self,
            deleted_at=now,
            deleted_by=actor,
            expires_at=now + policy.soft_delete_ttl,
        )
        return deleted._touch(now, actor)

    def restore(
        self,
        now: datetime,
        restored_by: str | None,
        policy: LifecyclePolicy,
    ) -> ProductDesign:
        """Transition Deleted -> Active, clearing the whole delete triple."""
        self._assert_modifiable(policy, "restored")
        if not self.is_deleted:
            raise ValidationError(f"Product design '{self.id}' is not deleted")
        if self.expires_at is not None and now >= self.expires_at:
            raise RestoreExpiredError(
                f"Product design '{self.id}' expired at {self.expires_at.isoformat()}"
            )

        restored = replace(self, deleted_at=None, deleted_by=None, expires_at=None)
        return restored._touch(now, restored_by)

    # --- Internal helpers -----------------------------------------------------

    def _assert_modifiable(self, policy: LifecyclePolicy, action: str) -> None:
        if not self.can_modify(policy):
            raise ForbiddenError(
                f"Product design '{self.id}' is printed and cannot be {action}"
            )

    def _touch(self, now: datetime, updated_by: str | None) -> ProductDesign:
        return replace(self, updated_at=now, updated_by=_clean_actor(updated_by))


def _clean_actor(actor: str | None) -> str | None:
    if actor is None:
        return None
    actor = actor.strip()
    return actor or None
