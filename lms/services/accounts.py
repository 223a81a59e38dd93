"""账户服务：学生与讲师共用的注册、登录与资料维护。"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, List, Type

from lms.core import FlowState, PayloadValidator, RecordAssembler, WriteFlow
from lms.db import Base, new_object_id
from lms.errors import AuthenticationFailed, EntityNotFound
from lms.models import EntityKind, Lecturer, User
from lms.security import TokenIssuer, hash_password, verify_password
from lms.services.presenters import present_lecturer, present_user
from lms.store import EntityStore

logger = logging.getLogger(__name__)

_MODELS: Dict[EntityKind, Type[Base]] = {
    EntityKind.USER: User,
    EntityKind.LECTURER: Lecturer,
}
_PRESENTERS: Dict[EntityKind, Callable[[Any], Dict[str, Any]]] = {
    EntityKind.USER: present_user,
    EntityKind.LECTURER: present_lecturer,
}


class AccountService:
    """``kind`` 取 ``EntityKind.USER`` 或 ``EntityKind.LECTURER``。"""

    def __init__(self, store: EntityStore, kind: EntityKind, issuer: TokenIssuer) -> None:
        self.store = store
        self.kind = kind
        self.model = _MODELS[kind]
        self.present = _PRESENTERS[kind]
        self.issuer = issuer
        self.validator = PayloadValidator(store)
        self.assembler = RecordAssembler()

    @property
    def label(self) -> str:
        return self.kind.value

    def register(self, payload: Dict[str, Any]) -> str:
        """注册并直接返回 Token。"""
        flow = WriteFlow(self.label, "create")
        with flow.step(FlowState.STRUCTURALLY_VALIDATED):
            self.validator.validate(self.kind, payload).raise_for_errors()
        with flow.step(FlowState.REFERENCES_RESOLVED):
            self.validator.ensure_unique_email(self.kind, payload["email"])
        with flow.step(FlowState.ASSEMBLED):
            values = self.assembler.assemble(self.kind, payload)
            values["password_hash"] = hash_password(payload["password"])
        with flow.step(FlowState.PERSISTED):
            account = self.store.insert(self.model(id=new_object_id(), **values))
        logger.info("%s %s registered", self.label.capitalize(), account.id)
        flow.advance(FlowState.RESPONDED)
        return self.issuer.issue(account.id, account.email, self.label)

    def login(self, email: str, password: str) -> str:
        account = self.store.find_one(self.model, email=email.strip())
        if account is None or not verify_password(password, account.password_hash):
            raise AuthenticationFailed("Invalid credentials")
        return self.issuer.issue(account.id, account.email, self.label)

    def update(self, account_id: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        flow = WriteFlow(self.label, "update")
        account = self._get_or_404(account_id)
        with flow.step(FlowState.STRUCTURALLY_VALIDATED):
            self.validator.validate(self.kind, payload, partial=True).raise_for_errors()
        with flow.step(FlowState.REFERENCES_RESOLVED):
            if "email" in payload:
                self.validator.ensure_unique_email(self.kind, payload["email"], exclude_id=account.id)
        with flow.step(FlowState.ASSEMBLED):
            values = self.assembler.assemble(self.kind, payload)
            if "password" in payload:
                values["password_hash"] = hash_password(payload["password"])
        with flow.step(FlowState.PERSISTED):
            account = self.store.update_by_id(self.model, account.id, values)
        flow.advance(FlowState.RESPONDED)
        return self.present(account)

    def get(self, account_id: str) -> Dict[str, Any]:
        return self.present(self._get_or_404(account_id))

    def list(self) -> List[Dict[str, Any]]:
        return [self.present(account) for account in self.store.find_all(self.model)]

    def delete(self, account_id: str) -> None:
        # 不级联删除其课程/成绩，引用保持悬空
        if self.store.delete_by_id(self.model, account_id) is None:
            raise EntityNotFound(self.label)
        logger.info("%s %s deleted", self.label.capitalize(), account_id)

    def _get_or_404(self, account_id: str):
        account = self.store.find_by_id(self.model, account_id)
        if account is None:
            raise EntityNotFound(self.label)
        return account
