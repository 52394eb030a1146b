# FILE: erp/utils/resp.py
from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse


def ok(data: Any = None, *, status_code: int = 200) -> JSONResponse:
    # jsonable_encoder converts datetime/date/Decimal/Enum to JSON-safe types
    return JSONResponse(status_code=status_code, content=jsonable_encoder(data))


def err(
    message: str = "Something went wrong",
    *,
    status_code: int = 400,
    details: Any = None,
) -> JSONResponse:
    """
    Standard error body:
    {
      "message": "...",
      "details": ... (optional)
    }
    """
    payload: Dict[str, Any] = {"message": message}
    if details is not None:
        payload["details"] = details
    return JSONResponse(status_code=status_code, content=jsonable_encoder(payload))


def page_meta(*, page: int, per_page: int, total: int) -> Dict[str, int]:
    total_pages = (total + per_page - 1) // per_page if per_page else 0
    return {
        "page": page,
        "perPage": per_page,
        "total": total,
        "totalPages": max(total_pages, 1) if total else 0,
    }


def paged(rows: Any, *, page: int, per_page: int, total: int, extra: Optional[Dict[str, Any]] = None) -> JSONResponse:
    payload: Dict[str, Any] = {"data": rows, **page_meta(page=page, per_page=per_page, total=total)}
    if extra:
        payload.update(extra)
    return ok(payload)
