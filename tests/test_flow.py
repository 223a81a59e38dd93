import pytest

from lms.core import FlowState, WriteFlow
from lms.errors import ValidationFailed


def test_flow_walks_every_state() -> None:
    flow = WriteFlow("course", "create")
    for state in (
        FlowState.STRUCTURALLY_VALIDATED,
        FlowState.REFERENCES_RESOLVED,
        FlowState.ASSEMBLED,
        FlowState.PERSISTED,
        FlowState.RESPONDED,
    ):
        with flow.step(state):
            pass
    assert flow.state is FlowState.RESPONDED
    assert flow.error is None
    assert len(flow.history) == 6


def test_flow_rejects_skipped_state() -> None:
    flow = WriteFlow("course", "create")
    with pytest.raises(RuntimeError):
        flow.advance(FlowState.PERSISTED)


def test_flow_records_error() -> None:
    flow = WriteFlow("course", "create")
    with pytest.raises(ValidationFailed):
        with flow.step(FlowState.STRUCTURALLY_VALIDATED):
            raise ValidationFailed(["name is required"])
    assert flow.state is FlowState.ERRORED
    assert flow.history == [FlowState.RECEIVED, FlowState.ERRORED]
    assert flow.error.reasons == ["name is required"]
