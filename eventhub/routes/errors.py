import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from eventhub.core.errors import DomainError, ErrorCode, EventBusyError, RuleViolationError

logger = logging.getLogger(__name__)

STATUS_BY_CODE = {
    ErrorCode.NOT_FOUND: 404,
    ErrorCode.RULE_VIOLATION: 409,
    ErrorCode.INVALID_ARGUMENT: 400,
    ErrorCode.UNEXPECTED: 500,
}


def status_for(exc: DomainError) -> int:
    if isinstance(exc, EventBusyError):
        return 503
    return STATUS_BY_CODE[exc.code]


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    body = {"code": exc.code.value, "detail": exc.message, **exc.context}
    if isinstance(exc, RuleViolationError):
        body["rule"] = exc.rule.name
    return JSONResponse(status_code=status_code, content=body)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
