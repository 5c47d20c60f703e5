"""Application service: product design queries.

The company filter is applied by the repository and asserted again here,
so a repository bug can never leak another company's designs.
"""

from __future__ import annotations

from designcat.application.product_design_lifecycle import (
    require_company_id,
    require_id,
)
from designcat.domain.context import RequestContext
from designcat.domain.exceptions import ForbiddenError
from designcat.domain.model.product_design import ProductDesign
from designcat.domain.repository.history_repository import HistoryRepository
from designcat.domain.repository.product_design_repository import (
    ProductDesignRepository,
)


class DesignQueries:

    def __init__(
        self,
        design_repo: ProductDesignRepository,
        history_repo: HistoryRepository,
    ) -> None:
        self._design_repo = design_repo
        self._history_repo = history_repo

    def get(self, ctx: RequestContext, design_id: str) -> ProductDesign:
        design_id = require_id(design_id)
        cid = require_company_id(ctx)

        ctx.check()
        design = self._design_repo.get_by_id(ctx, design_id)
        if design.company_id != cid:
            raise ForbiddenError(
                f"Product design '{design_id}' does not belong to this company"
            )
        return design

    def list(self, ctx: RequestContext) -> list[ProductDesign]:
        """Active (not deleted) designs of the caller's company."""
        return [d for d in self._owned(ctx) if not d.is_deleted]

    def list_deleted(self, ctx: RequestContext) -> list[ProductDesign]:
        return [d for d in self._owned(ctx) if d.is_deleted]

    def list_printed(self, ctx: RequestContext) -> list[ProductDesign]:
        return [d for d in self._owned(ctx) if d.printed and not d.is_deleted]

    def list_history(self, ctx: RequestContext, design_id: str) -> list[ProductDesign]:
        """Snapshots of a design, newest first."""
        self.get(ctx, design_id)

        ctx.check()
        return self._history_repo.list_by_design_id(ctx, design_id.strip())

    def _owned(self, ctx: RequestContext) -> list[ProductDesign]:
        cid = require_company_id(ctx)

        ctx.check()
        rows = self._design_repo.list_by_company(ctx, cid)
        return [d for d in rows if d.company_id == cid]
