"""Domain service: reference-set normalization and merging.

Both functions are pure.  They never raise for malformed entries: blank
target ids are dropped and duplicates collapse onto their first occurrence
after a *stable* sort by ``order``, so entries with equal orders keep the
relative position they had in the input.
"""

from __future__ import annotations

from collections.abc import Iterable

from designcat.domain.model.value_objects import ModelReference


def _sorted_unique_ids(refs: Iterable[ModelReference]) -> list[str]:
    """Stable-sort by order, trim, drop blanks, keep first occurrences."""
    ordered = sorted(refs, key=lambda ref: ref.order)

    seen: set[str] = set()
    ids: list[str] = []
    for ref in ordered:
        target_id = (ref.target_id or "").strip()
        if not target_id or target_id in seen:
            continue
        seen.add(target_id)
        ids.append(target_id)
    return ids


def references_from_ids(target_ids: Iterable[str]) -> list[ModelReference]:
    """Number an ordered id list ``1..N`` (ids are taken as given)."""
    return [
        ModelReference(target_id=target_id, order=position)
        for position, target_id in enumerate(target_ids, start=1)
    ]


def normalize_references(refs: Iterable[ModelReference]) -> list[ModelReference]:
    """Return the canonical form of *refs*.

    Example::

        [b:5, a:1, a:9]  ->  [a:1, b:2]
    """
    return references_from_ids(_sorted_unique_ids(refs))


def merge_references(
    existing: Iterable[ModelReference],
    append_refs: Iterable[ModelReference],
) -> list[ModelReference]:
    """Append *append_refs* after *existing* and renumber.

    Existing entries keep their relative order and always precede newly
    appended ones.  An id present on both sides stays at its existing
    position.
    """
    merged = _sorted_unique_ids(existing)
    present = set(merged)
    for target_id in _sorted_unique_ids(append_refs):
        if target_id in present:
            continue
        present.add(target_id)
        merged.append(target_id)
    return references_from_ids(merged)


def sanitize_ids(raw_ids: Iterable[str]) -> list[str]:
    """Trim, drop blanks and drop duplicates while preserving input order."""
    seen: set[str] = set()
    out: list[str] = []
    for raw in raw_ids:
        value = (raw or "").strip()
        if not value or value in seen:
            continue
        seen.add(value)
        out.append(value)
    return out
