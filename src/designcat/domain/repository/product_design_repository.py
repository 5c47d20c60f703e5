"""Abstract repository for the ProductDesign aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (JSON, SQL, in-memory)
live in the infrastructure layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from designcat.domain.context import RequestContext
from designcat.domain.model.product_design import ProductDesign


class ProductDesignRepository(ABC):

    @abstractmethod
    def get_by_id(self, ctx: RequestContext, design_id: str) -> ProductDesign:
        """Return a design by its ID.

        Raises EntityNotFoundError if it does not exist.
        """

    @abstractmethod
    def create(self, ctx: RequestContext, design: ProductDesign) -> ProductDesign:
        """Persist a new design, assigning its ID, and return the stored copy."""

    @abstractmethod
    def save(self, ctx: RequestContext, design: ProductDesign) -> ProductDesign:
        """Overwrite an existing design and return the stored copy.

        ``design.version`` must equal the stored version, otherwise
        ConflictError is raised.  The stored copy carries the next version.
        """

    @abstractmethod
    def mark_printed(self, ctx: RequestContext, design_id: str) -> ProductDesign:
        """Set the printed flag and return the stored copy."""

    @abstractmethod
    def list_by_company(self, ctx: RequestContext, company_id: str) -> list[ProductDesign]:
        """Return every design (deleted ones included) owned by a company."""
