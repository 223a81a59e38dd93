"""请求校验、引用解析与记录组装。"""

from lms.core.assembler import RecordAssembler
from lms.core.flow import FlowState, WriteFlow
from lms.core.resolver import ReferenceResolver, is_object_id
from lms.core.validator import PayloadValidator, ValidationResult, normalize_status

__all__ = [
    "FlowState",
    "PayloadValidator",
    "RecordAssembler",
    "ReferenceResolver",
    "ValidationResult",
    "WriteFlow",
    "is_object_id",
    "normalize_status",
]
