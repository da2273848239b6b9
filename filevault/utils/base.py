import secrets
from math import ceil


def generate_link_token(num_bytes: int = 16) -> str:
    """Random hex token, 16 bytes gives 128 bits of entropy."""
    return secrets.token_hex(num_bytes)


def page_window(page: int, limit: int) -> tuple[int, int]:
    """Translate a 1-based page and a page size into (skip, limit)."""
    page = max(page, 1)
    limit = max(limit, 1)
    return (page - 1) * limit, limit


def total_pages(total: int, limit: int) -> int:
    return ceil(total / limit) if limit > 0 else 0
