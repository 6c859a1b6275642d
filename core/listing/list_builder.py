# Path: core/listing/list_builder.py
# Purpose: Cluster an ordered sequence of image records into single and group list entries.
# Layer: core/listing.
# Details: One pass over adjacent pairs; the similarity predicate is used exactly as supplied by the hash type.

from __future__ import annotations

from typing import Iterable, List

from core.models.domain import GroupEntry, ImageEntry, ImageListEntry, ImageRecord


def _close_group(group: List[ImageEntry]) -> ImageListEntry:
    return GroupEntry(tuple(group)) if len(group) > 1 else group[0]


def build_image_list(records: Iterable[ImageRecord], flush_trailing_group: bool = True) -> List[ImageListEntry]:
    """Convert ordered records into list entries, grouping runs of similar neighbours.

    Each record is compared only with the record immediately before it, as
    ``record.image_hash.is_similar(previous_hash)``. A group can therefore chain
    members whose first and last images are not similar to each other.

    With ``flush_trailing_group=False`` the final run is dropped, matching
    older list output.
    """

    iterator = iter(records)
    first = next(iterator, None)
    if first is None:
        return []

    previous_hash = first.image_hash
    current_group: List[ImageEntry] = [ImageEntry(first.id)]
    results: List[ImageListEntry] = []

    for record in iterator:
        if not record.image_hash.is_similar(previous_hash):
            results.append(_close_group(current_group))
            current_group = []

        current_group.append(ImageEntry(record.id))
        previous_hash = record.image_hash

    if flush_trailing_group:
        results.append(_close_group(current_group))

    return results
