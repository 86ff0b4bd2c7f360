"""
HTTP Exception helpers to reduce code duplication in routes.

Every helper raises `HTTPException`; the handler registered in `main.py`
renders it as `{"success": false, "error": detail}`.

Usage:
    from scholarcast.utils.exceptions import raise_not_found, raise_bad_request

    raise_not_found("Illustration", 42)
    raise_bad_request("Illustration id must be positive")
"""

from typing import NoReturn

from fastapi import HTTPException, status


def raise_http(status_code: int, detail: str) -> NoReturn:
    raise HTTPException(status_code=status_code, detail=detail)


def raise_bad_request(detail: str) -> NoReturn:
    """Raise HTTP 400 Bad Request."""
    raise_http(status.HTTP_400_BAD_REQUEST, detail)


def raise_not_found(resource: str, id: int | str | None = None) -> NoReturn:
    """Raise HTTP 404 Not Found."""
    detail = f"{resource} with id {id} not found" if id is not None else f"{resource} not found"
    raise_http(status.HTTP_404_NOT_FOUND, detail)


def raise_internal_error(detail: str = "Internal server error") -> NoReturn:
    """Raise HTTP 500 Internal Server Error."""
    raise_http(status.HTTP_500_INTERNAL_SERVER_ERROR, detail)
