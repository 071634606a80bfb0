from __future__ import annotations

from typing import List, Sequence, Tuple, TypeVar

T = TypeVar("T")


def paginate(items: Sequence[T], page: int, per_page: int) -> Tuple[List[T], int]:
    """
    Slice an already-filtered sequence into one page.

    `page` is 1-based. Returns the page window and the total number of
    items before slicing, which is what list endpoints report as
    `meta.total`.
    """
    total = len(items)
    start = (page - 1) * per_page
    return list(items[start : start + per_page]), total
