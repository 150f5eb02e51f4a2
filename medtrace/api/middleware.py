"""API middleware: correlation ID, actor context, request audit."""

import json
import logging
import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse, Response

from medtrace.core.context import actor_id_ctx, correlation_id_ctx

logger = logging.getLogger(__name__)

ACTOR_HEADER = "X-Actor-ID"
CORRELATION_HEADER = "X-Correlation-ID"
# Liveness probes carry no resolved identity.
ACTOR_EXEMPT_PATHS = frozenset({"/health"})
_PRODUCT_PATH = re.compile(r"^/products/([^/]+)")
_LEDGER_WRITE_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class CorrelationIdMiddleware(BaseHTTPMiddleware):
    """Generate or preserve correlation ID; attach to request.state, response header, and logging context."""

    async def dispatch(self, request: Request, call_next) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid.uuid4())
        request.state.correlation_id = correlation_id
        correlation_id_ctx.set(correlation_id)

        response = await call_next(request)
        response.headers[CORRELATION_HEADER] = correlation_id
        return response


class ActorContextMiddleware(BaseHTTPMiddleware):
    """
    Extract the resolved actor identity from X-Actor-ID; return 400 if missing.
    The identity is already authenticated upstream and is not checked here.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        if request.url.path in ACTOR_EXEMPT_PATHS:
            return await call_next(request)
        actor_id = request.headers.get(ACTOR_HEADER)
        if not actor_id or not actor_id.strip():
            return JSONResponse(
                status_code=400,
                content={"detail": "X-Actor-ID header is required"},
            )
        request.state.actor_id = actor_id.strip()
        actor_id_ctx.set(request.state.actor_id)
        return await call_next(request)


class AuditTriggerMiddleware(BaseHTTPMiddleware):
    """
    After response: log one structured audit line per request.
    Requests that may append to the ledger are flagged with ledger_write and, when the
    path names one, the product_id they touched.
    """

    async def dispatch(self, request: Request, call_next) -> Response:
        response = await call_next(request)
        audit_event = {
            "event": "request_audit",
            "correlation_id": getattr(request.state, "correlation_id", None),
            "actor_id": getattr(request.state, "actor_id", None),
            "path": request.url.path,
            "method": request.method,
            "status_code": response.status_code,
            "ledger_write": request.method in _LEDGER_WRITE_METHODS,
        }
        match = _PRODUCT_PATH.match(request.url.path)
        if match:
            audit_event["product_id"] = match.group(1)
        logger.info(json.dumps(audit_event))
        return response
