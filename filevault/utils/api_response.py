from typing import Any, Dict, List, Optional, Sequence

from fastapi import Request
from starlette.responses import JSONResponse
from starlette import status

from filevault.schemas.response import ApiResponse, Pagination
from filevault.utils.base import total_pages


def _body(model: ApiResponse) -> dict:
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)

def ok(
    data: Any = None,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
    headers: Optional[Dict[str, str]] = None,
):
    body = _body(ApiResponse[Any](status_code=status_code, success=True, message=message, data=data))
    return JSONResponse(content=body, status_code=status_code, headers=headers)

def created(
    data: Any = None,
    message: str = "Created",
    headers: Optional[Dict[str, str]] = None,
):
    return ok(data=data, message=message, status_code=status.HTTP_201_CREATED, headers=headers)

def _page_url(request: Request, page: int, limit: int) -> str:
    qp = dict(request.query_params)
    qp["page"] = str(page)
    qp["limit"] = str(limit)
    return str(request.url.replace_query_params(**qp))

def paginated(
    *,
    request: Request,
    items: Sequence[Any],
    total: int,
    page: int,
    limit: int,
    message: Optional[str] = None,
    status_code: int = status.HTTP_200_OK,
):
    pages = total_pages(total, limit)

    next_url = _page_url(request, page + 1, limit) if page < pages else None
    prev_url = _page_url(request, page - 1, limit) if page > 1 else None

    meta = Pagination(
        total=total,
        page=page,
        limit=limit,
        total_pages=pages,
        next=next_url,
        previous=prev_url,
    )

    body = _body(ApiResponse[List[Any]](
        status_code=status_code,
        success=True,
        message=message,
        data=list(items),
        meta=meta,
    ))

    return JSONResponse(content=body, status_code=status_code)
