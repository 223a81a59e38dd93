"""记录组装：把已校验的请求体与已解析的引用规整为待持久化的字段字典。

纯函数，不做任何 I/O。只输出请求中出现的字段，部分更新时由调用方与现有记录合并。
"""

import math
from typing import Any, Dict, Optional

from lms.errors import TypeMismatch
from lms.models import EntityKind
from lms.core.validator import normalize_status

NUMERIC_COURSE_FIELDS = ("duration", "price")
COURSE_TEXT_FIELDS = ("name", "description", "category")
ACCOUNT_TEXT_FIELDS = ("name", "email", "department")


def _strip(value: Any) -> Any:
    return value.strip() if isinstance(value, str) else value


def _to_number(name: str, value: Any) -> Optional[float]:
    if value is None:
        return None
    if isinstance(value, bool):
        raise TypeMismatch(f"{name} must be a number")
    try:
        number = float(_strip(value))
    except (TypeError, ValueError):
        raise TypeMismatch(f"{name} must be a number, got {value!r}") from None
    # nan/inf 无法持久化为有效数值
    if not math.isfinite(number):
        raise TypeMismatch(f"{name} must be a finite number, got {value!r}")
    return number


class RecordAssembler:
    def assemble(self, kind: EntityKind, payload: Dict[str, Any], resolved: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        resolved = resolved or {}
        if kind is EntityKind.COURSE:
            return self._course(payload, resolved)
        if kind is EntityKind.GRADE:
            return self._grade(payload, resolved)
        return self._account(payload)

    def _course(self, payload: Dict[str, Any], resolved: Dict[str, Any]) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        for name in COURSE_TEXT_FIELDS:
            if name in payload:
                record[name] = _strip(payload[name])
        for name in NUMERIC_COURSE_FIELDS:
            if name in payload:
                record[name] = _to_number(name, payload[name])
        if "level" in payload:
            record["level"] = payload["level"]
        if "enrollment_limit" in payload:
            record["enrollment_limit"] = payload["enrollment_limit"]
        if "content" in payload:
            record["content"] = [
                {"title": item["title"].strip(), "url": item["url"].strip()}
                for item in payload["content"]
            ]
        if "lecturer" in resolved:
            record["lecturer_id"] = resolved["lecturer"].id
        return record

    def _grade(self, payload: Dict[str, Any], resolved: Dict[str, Any]) -> Dict[str, Any]:
        record: Dict[str, Any] = {}
        if "student" in resolved:
            record["student_id"] = resolved["student"].id
        if "course" in resolved:
            record["course_id"] = resolved["course"].id
        if payload.get("status") is not None:
            record["status"] = normalize_status(payload["status"])
        if "remarks" in payload:
            record["remarks"] = _strip(payload["remarks"])
        return record

    def _account(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        # 密码由服务层单独哈希，不在此处出现
        return {name: _strip(payload[name]) for name in ACCOUNT_TEXT_FIELDS if name in payload}
