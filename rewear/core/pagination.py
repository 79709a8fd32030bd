"""Pagination helpers."""


def paginate(limit: int, offset: int, max_limit: int = 100) -> tuple[int, int]:
    """Clamp limit/offset; return (limit, offset)."""
    limit = max(1, min(limit, max_limit))
    offset = max(0, offset)
    return limit, offset
