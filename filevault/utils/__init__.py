from filevault.utils.logging import get_logger, setup_logging
from filevault.utils.api_response import ok, created, paginated
from filevault.utils.base import generate_link_token, page_window, total_pages


__all__= [
    "get_logger",
    "setup_logging",
    "ok",
    "created",
    "paginated",
    "generate_link_token",
    "page_window",
    "total_pages",
]
