from typing import Optional


def normalize(start_index: Optional[int], count: Optional[int]):
    # SCIM startIndex is 1-based, values below 1 mean 1; negative count means 0
    start_index = 1 if start_index is None or start_index < 1 else int(start_index)
    if count is not None:
        count = max(int(count), 0)
    return start_index, count


def window(start_index: Optional[int], count: Optional[int]):
    """Translate SCIM paging to the directory's 0-based ``first``/``max``."""
    start_index, count = normalize(start_index, count)
    return start_index - 1, count


def page(items: list, start_index: Optional[int], count: Optional[int]) -> list:
    first, count = window(start_index, count)
    if count is None:
        return items[first:]
    return items[first:first + count]


def list_response(resources: list, total: int, start_index: Optional[int]) -> dict:
    start_index, _ = normalize(start_index, None)
    return {
        'totalResults': total,
        'startIndex': start_index,
        'itemsPerPage': len(resources),
        'Resources': resources,
    }
