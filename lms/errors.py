"""错误分类与 FastAPI 异常处理器。

每类错误都带有机器可读的 ``kind`` 与人类可读的 ``message``，
由 ``register_exception_handlers`` 统一渲染为 JSON 响应。
"""

import logging
from typing import List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class LMSError(Exception):
    """所有业务错误的基类。"""

    kind = "error"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str, reasons: Optional[List[str]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.reasons = list(reasons or [])

    def to_dict(self) -> dict:
        body = {"kind": self.kind, "detail": self.message}
        if self.reasons:
            body["reasons"] = self.reasons
        return body


class ValidationFailed(LMSError):
    """字段级校验失败，可由调用方修正。"""

    kind = "validation_failed"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, reasons: List[str], message: str = "Validation failed") -> None:
        super().__init__(message, reasons)


class ReferenceNotFound(LMSError):
    """请求中引用的实体不存在。"""

    kind = "reference_not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str, token: str) -> None:
        super().__init__(f"{entity.capitalize()} not found: {token}")
        self.entity = entity
        self.token = token

    def to_dict(self) -> dict:
        body = super().to_dict()
        body["token"] = self.token
        return body


class EntityNotFound(LMSError):
    """按 id 访问的目标记录不存在。"""

    kind = "not_found"
    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str) -> None:
        super().__init__(f"{entity.capitalize()} not found")
        self.entity = entity


class UniquenessConflict(LMSError):
    kind = "uniqueness_conflict"
    status_code = status.HTTP_409_CONFLICT


class TypeMismatch(LMSError):
    kind = "type_mismatch"
    status_code = status.HTTP_400_BAD_REQUEST


class StoreConflict(LMSError):
    """应用层检查通过后仍在存储层唯一约束上冲突（并发竞争）。"""

    kind = "store_conflict"
    status_code = status.HTTP_409_CONFLICT


class StoreUnavailable(LMSError):
    """存储暂时不可用，原请求可直接重试。"""

    kind = "store_unavailable"
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


class AuthenticationFailed(LMSError):
    kind = "authentication_failed"
    status_code = status.HTTP_401_UNAUTHORIZED


async def lms_error_handler(request: Request, exc: LMSError) -> JSONResponse:
    if isinstance(exc, StoreUnavailable):
        logger.error("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message, exc_info=exc)
    else:
        logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.kind, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthenticationFailed) else None
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict(), headers=headers)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """请求体结构不合法时同样按 ``validation_failed`` 返回 400。"""

    reasons = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part != "body"]
        field = ".".join(loc) or "body"
        reasons.append(f"{field}: {error.get('msg', 'invalid value')}")
    failure = ValidationFailed(reasons)
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, failure.kind, reasons)
    return JSONResponse(status_code=failure.status_code, content=failure.to_dict())


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("Unhandled exception on %s %s", request.method, request.url.path, exc_info=exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"kind": "internal_error", "detail": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(LMSError, lms_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
