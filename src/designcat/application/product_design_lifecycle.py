"""Application service: product design lifecycle.

Orchestrates the ProductDesign aggregate, its repository and the history
store.  Every successful mutation is followed by a history snapshot; if
the snapshot cannot be written the whole operation fails, so no change is
reported as done without its audit record.

Tenant rules:
- the tenant always comes from the request context, never from the payload
- a design owned by another tenant is refused with ForbiddenError before
  anything is written
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import replace
from datetime import datetime, timezone

from designcat.domain.context import RequestContext
from designcat.domain.exceptions import (
    ForbiddenError,
    InvalidCompanyIDError,
    InvalidIDError,
    ValidationError,
)
from designcat.domain.model.policy import LifecyclePolicy
from designcat.domain.model.product_design import ProductDesign
from designcat.domain.repository.history_repository import HistoryRepository
from designcat.domain.repository.product_design_repository import (
    ProductDesignRepository,
)
from designcat.domain.service.reference_set_service import (
    normalize_references,
    references_from_ids,
    sanitize_ids,
)

logger = logging.getLogger(__name__)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def require_company_id(ctx: RequestContext) -> str:
    cid = ctx.tenant_id
    if not cid:
        raise InvalidCompanyIDError("Company ID is required")
    return cid


def require_id(raw_id: str | None) -> str:
    value = (raw_id or "").strip()
    if not value:
        raise InvalidIDError("Product design ID is required")
    return value


class ProductDesignLifecycleManager:

    def __init__(
        self,
        design_repo: ProductDesignRepository,
        history_repo: HistoryRepository,
        policy: LifecyclePolicy | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._design_repo = design_repo
        self._history_repo = history_repo
        self._policy = policy or LifecyclePolicy()
        self._clock = clock or _utc_now

    # --- Commands -------------------------------------------------------------

    def create(self, ctx: RequestContext, design: ProductDesign) -> ProductDesign:
        """Create a design for the caller's company and record its first snapshot."""
        cid = require_company_id(ctx)
        now = self._clock()

        created_by = design.created_by or ctx.actor_id
        prepared = replace(
            design,
            company_id=cid,
            references=tuple(normalize_references(design.references)),
            printed=False,
            created_at=design.created_at or now,
            created_by=created_by,
            updated_at=design.updated_at or now,
            updated_by=design.updated_by or created_by,
            deleted_at=None,
            deleted_by=None,
            expires_at=None,
            version=0,
        )

        ctx.check()
        created = self._design_repo.create(ctx, prepared)
        self._snapshot(ctx, created)

        logger.info("Product design %s created for company %s", created.id, cid)
        return created

    def update(self, ctx: RequestContext, design: ProductDesign) -> ProductDesign:
        """Overwrite the editable content of an existing design.

        Lifecycle fields (printed flag, delete triple, creation audit) are
        kept from the stored copy.  The caller's ``version`` is used as the
        concurrency token when set; otherwise the version just read.
        """
        design_id = require_id(design.id)
        cid = require_company_id(ctx)

        current = self._load_owned(ctx, design_id, cid)

        revised = current.revise(
            product_name=design.product_name,
            brand_id=design.brand_id,
            assignee_id=design.assignee_id,
            references=design.references,
            now=self._clock(),
            updated_by=design.updated_by or ctx.actor_id,
            policy=self._policy,
        )
        revised = replace(
            revised,
            company_id=cid,
            version=design.version or current.version,
        )

        updated = self._save(ctx, revised)
        logger.info("Product design %s updated (version %d)", updated.id, updated.version)
        return updated

    def mark_printed(self, ctx: RequestContext, design_id: str) -> ProductDesign:
        """Flag the design as printed; from then on policy may lock it."""
        design_id = require_id(design_id)
        cid = require_company_id(ctx)

        self._load_owned(ctx, design_id, cid)

        ctx.check()
        updated = self._design_repo.mark_printed(ctx, design_id)
        self._snapshot(ctx, updated)

        logger.info("Product design %s marked as printed", design_id)
        return updated

    def soft_delete_with_models(
        self,
        ctx: RequestContext,
        design_id: str,
        deleted_by: str | None = None,
    ) -> ProductDesign:
        """Soft-delete a design; it becomes purgeable after the retention window."""
        design_id = require_id(design_id)
        cid = require_company_id(ctx)

        current = self._load_owned(ctx, design_id, cid)

        deleted = current.soft_delete(
            self._clock(), deleted_by or ctx.actor_id, self._policy
        )
        deleted = replace(deleted, company_id=cid)

        saved = self._save(ctx, deleted)
        logger.info(
            "Product design %s soft-deleted, expires at %s",
            design_id,
            saved.expires_at.isoformat() if saved.expires_at else "-",
        )
        return saved

    def restore_with_models(
        self,
        ctx: RequestContext,
        design_id: str,
        restored_by: str | None = None,
    ) -> ProductDesign:
        """Undo a soft delete within the retention window."""
        design_id = require_id(design_id)
        cid = require_company_id(ctx)

        current = self._load_owned(ctx, design_id, cid)

        restored = current.restore(
            self._clock(), restored_by or ctx.actor_id, self._policy
        )
        restored = replace(restored, company_id=cid)

        saved = self._save(ctx, restored)
        logger.info("Product design %s restored", design_id)
        return saved

    def append_model_refs(
        self,
        ctx: RequestContext,
        design_id: str,
        model_ids: Iterable[str],
    ) -> ProductDesign:
        """Append models after the existing references.

        The input order numbers the new references; ids already referenced
        keep their current position.  Audit fields are not touched.
        """
        design_id = require_id(design_id)
        cid = require_company_id(ctx)

        ids = sanitize_ids(model_ids)
        if not ids:
            raise ValidationError("At least one model ID is required")

        current = self._load_owned(ctx, design_id, cid)

        appended = current.with_appended_references(
            references_from_ids(ids), self._policy
        )
        appended = replace(appended, company_id=cid)

        saved = self._save(ctx, appended)
        logger.info(
            "Appended %d model reference(s) to product design %s", len(ids), design_id
        )
        return saved

    # --- Internal helpers -----------------------------------------------------

    def _load_owned(self, ctx: RequestContext, design_id: str, cid: str) -> ProductDesign:
        ctx.check()
        current = self._design_repo.get_by_id(ctx, design_id)
        if (current.company_id or "").strip() != cid:
            logger.warning(
                "Refused cross-company access to product design %s by company %s",
                design_id,
                cid,
            )
            raise ForbiddenError(
                f"Product design '{design_id}' does not belong to this company"
            )
        return current

    def _save(self, ctx: RequestContext, design: ProductDesign) -> ProductDesign:
        ctx.check()
        saved = self._design_repo.save(ctx, design)
        self._snapshot(ctx, saved)
        return saved

    def _snapshot(self, ctx: RequestContext, design: ProductDesign) -> None:
        ctx.check()
        self._history_repo.save_snapshot(ctx, design)
