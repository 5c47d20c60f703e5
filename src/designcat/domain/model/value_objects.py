"""Value Objects shared across the domain.

Value Objects are immutable and compared by value, not identity.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ModelReference:
    """A link from a product design to one of its models.

    ``order`` is the display position.  Raw input may carry blanks,
    duplicates or colliding orders; only the reference-set service
    produces canonical lists (unique ids, orders ``1..N``).
    """

    target_id: str
    order: int

    def __str__(self) -> str:
        return f"{self.order}:{self.target_id}"


@dataclass(frozen=True)
class ModelAttributes:
    """Display attributes of a model (size, colour, packed RGB)."""

    size: str = ""
    color: str = ""
    rgb: int | None = None

    @property
    def is_empty(self) -> bool:
        return not self.size and not self.color and self.rgb is None

    def trimmed(self) -> ModelAttributes:
        return ModelAttributes(
            size=(self.size or "").strip(),
            color=(self.color or "").strip(),
            rgb=self.rgb,
        )
