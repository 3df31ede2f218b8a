from __future__ import annotations

import re
from contextvars import ContextVar
from uuid import uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request

REQUEST_ID_HEADER = "X-Request-Id"
COMPANY_ID_HEADER = "X-Company-Id"

# Inbound ids are echoed into headers and logs.
_VALID_REQUEST_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")

request_id_context: ContextVar[str | None] = ContextVar("request_id", default=None)
company_id_context: ContextVar[str | None] = ContextVar("company_id", default=None)


def get_request_id() -> str | None:
    return request_id_context.get()


def get_company_id() -> str | None:
    return company_id_context.get()


def _inbound_request_id(request: Request) -> str:
    candidate = request.headers.get(REQUEST_ID_HEADER, "")
    if _VALID_REQUEST_ID.match(candidate):
        return candidate
    return uuid4().hex


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Binds the request id and the caller's tenant for the life of a request."""

    async def dispatch(self, request: Request, call_next):
        request_id = _inbound_request_id(request)
        request_token = request_id_context.set(request_id)
        company_token = company_id_context.set(request.headers.get(COMPANY_ID_HEADER) or None)
        request.state.request_id = request_id
        try:
            response = await call_next(request)
        finally:
            company_id_context.reset(company_token)
            request_id_context.reset(request_token)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response
