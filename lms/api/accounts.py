"""学生（/api/users）与讲师（/api/lecturers）账户 API。"""

from datetime import datetime
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, status
from pydantic import BaseModel, EmailStr

from lms.dependencies import account_service_dependency, get_token_claims
from lms.errors import AuthenticationFailed, EntityNotFound
from lms.models import EntityKind
from lms.security import TokenClaims
from lms.services.accounts import AccountService


# === Schemas ===

class UserRegister(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class LecturerRegister(UserRegister):
    department: Optional[str] = None


class UserUpdate(BaseModel):
    name: Optional[str] = None
    email: Optional[EmailStr] = None
    password: Optional[str] = None


class LecturerUpdate(UserUpdate):
    department: Optional[str] = None


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    message: str
    token: str


class UserResponse(BaseModel):
    id: str
    name: str
    email: str
    grades: List[str]
    created_at: datetime
    updated_at: datetime


class LecturerResponse(BaseModel):
    id: str
    name: str
    email: str
    department: str
    courses: List[str]
    created_at: datetime
    updated_at: datetime


# === 路由工厂 ===

def build_account_router(
    kind: EntityKind,
    register_schema: Type[BaseModel],
    update_schema: Type[BaseModel],
    response_schema: Type[BaseModel],
) -> APIRouter:
    """学生与讲师的路由形状一致，仅字段集不同。"""

    router = APIRouter()
    get_service = account_service_dependency(kind)
    label = kind.value.capitalize()

    @router.post("/register", response_model=TokenResponse, status_code=status.HTTP_201_CREATED)
    def register(
        data: register_schema,  # type: ignore[valid-type]
        service: AccountService = Depends(get_service),
    ):
        token = service.register(data.model_dump(exclude_unset=True))
        return {"message": f"{label} registered successfully", "token": token}

    @router.post("/login", response_model=TokenResponse)
    def login(data: LoginRequest, service: AccountService = Depends(get_service)):
        token = service.login(data.email, data.password)
        return {"message": "Login successful", "token": token}

    @router.post("/logout")
    def logout():
        """Token 无状态，客户端丢弃即可。"""
        return {"message": "Logout successful"}

    @router.get("/me", response_model=response_schema)
    def me(
        claims: TokenClaims = Depends(get_token_claims),
        service: AccountService = Depends(get_service),
    ):
        if claims.kind != kind.value:
            raise AuthenticationFailed(f"Token does not belong to a {kind.value}")
        try:
            return service.get(claims.entity_id)
        except EntityNotFound:
            raise AuthenticationFailed("Account no longer exists") from None

    @router.get("/", response_model=List[response_schema])
    def list_accounts(service: AccountService = Depends(get_service)):
        return service.list()

    @router.get("/{account_id}", response_model=response_schema)
    def get_account(account_id: str, service: AccountService = Depends(get_service)):
        return service.get(account_id)

    @router.put("/{account_id}")
    def update_account(
        account_id: str,
        data: update_schema,  # type: ignore[valid-type]
        service: AccountService = Depends(get_service),
    ):
        account = service.update(account_id, data.model_dump(exclude_unset=True))
        return {"message": f"{label} updated successfully", kind.value: account}

    @router.delete("/{account_id}")
    def delete_account(account_id: str, service: AccountService = Depends(get_service)):
        service.delete(account_id)
        return {"message": f"{label} deleted successfully"}

    return router


users_router = build_account_router(EntityKind.USER, UserRegister, UserUpdate, UserResponse)
lecturers_router = build_account_router(
    EntityKind.LECTURER, LecturerRegister, LecturerUpdate, LecturerResponse
)
