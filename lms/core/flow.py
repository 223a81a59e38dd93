"""单次创建/更新请求的状态机。

Received → StructurallyValidated → ReferencesResolved → Assembled → Persisted → Responded，
任意阶段出错进入 Errored 并保留原始异常。
"""

import enum
import logging
from contextlib import contextmanager
from typing import Iterator, List, Optional

from lms.errors import LMSError

logger = logging.getLogger(__name__)


class FlowState(str, enum.Enum):
    RECEIVED = "received"
    STRUCTURALLY_VALIDATED = "structurally_validated"
    REFERENCES_RESOLVED = "references_resolved"
    ASSEMBLED = "assembled"
    PERSISTED = "persisted"
    RESPONDED = "responded"
    ERRORED = "errored"


_NEXT = {
    FlowState.RECEIVED: FlowState.STRUCTURALLY_VALIDATED,
    FlowState.STRUCTURALLY_VALIDATED: FlowState.REFERENCES_RESOLVED,
    FlowState.REFERENCES_RESOLVED: FlowState.ASSEMBLED,
    FlowState.ASSEMBLED: FlowState.PERSISTED,
    FlowState.PERSISTED: FlowState.RESPONDED,
}


class WriteFlow:
    def __init__(self, entity: str, operation: str) -> None:
        self.entity = entity
        self.operation = operation
        self.state = FlowState.RECEIVED
        self.history: List[FlowState] = [FlowState.RECEIVED]
        self.error: Optional[LMSError] = None

    def advance(self, target: FlowState) -> None:
        expected = _NEXT.get(self.state)
        if target is not expected:
            raise RuntimeError(f"Illegal transition {self.state.value} -> {target.value}")
        logger.debug("%s %s: %s -> %s", self.entity, self.operation, self.state.value, target.value)
        self.state = target
        self.history.append(target)

    def fail(self, error: LMSError) -> None:
        logger.debug("%s %s: %s -> errored (%s)", self.entity, self.operation, self.state.value, error.kind)
        self.error = error
        self.state = FlowState.ERRORED
        self.history.append(FlowState.ERRORED)

    @contextmanager
    def step(self, target: FlowState) -> Iterator[None]:
        """执行一个阶段；成功则推进到 ``target``，业务错误则进入 Errored 后继续抛出。"""
        try:
            yield
        except LMSError as exc:
            self.fail(exc)
            raise
        self.advance(target)
