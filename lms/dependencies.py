"""FastAPI 依赖注入工具。"""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from lms.config import get_settings
from lms.db import get_db
from lms.errors import AuthenticationFailed
from lms.models import EntityKind
from lms.security import TokenClaims, TokenIssuer
from lms.services.accounts import AccountService
from lms.services.courses import CourseService
from lms.services.grades import GradeService
from lms.store import EntityStore


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    """每个请求一个存储实例，包裹本请求的 Session。"""

    return EntityStore(db)


def get_token_issuer() -> TokenIssuer:
    return TokenIssuer(get_settings())


def get_course_service(store: EntityStore = Depends(get_store)) -> CourseService:
    return CourseService(store)


def get_grade_service(store: EntityStore = Depends(get_store)) -> GradeService:
    return GradeService(store)


def account_service_dependency(kind: EntityKind):
    """按账户类型生成服务依赖。"""

    def _get_account_service(
        store: EntityStore = Depends(get_store),
        issuer: TokenIssuer = Depends(get_token_issuer),
    ) -> AccountService:
        return AccountService(store, kind, issuer)

    return _get_account_service


def get_token_claims(
    authorization: Optional[str] = Header(None),
    issuer: TokenIssuer = Depends(get_token_issuer),
) -> TokenClaims:
    """从 ``Authorization: Bearer <token>`` 中解析身份。"""

    if not authorization or not authorization.startswith("Bearer "):
        raise AuthenticationFailed("Missing bearer token")
    claims = issuer.verify(authorization[7:])
    if claims is None:
        raise AuthenticationFailed("Invalid or expired token")
    return claims
