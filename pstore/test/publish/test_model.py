"""Tests for pstore.publish.model module."""

from __future__ import annotations

import pytest

from pstore.publish.model import BinaryEntry, EditState, PublishRequest, can_transition


def test_binary_entry_mapping_flag() -> None:
    assert BinaryEntry("app.aab", "mapping.txt").has_mapping
    assert not BinaryEntry("app.aab").has_mapping


def test_publish_request_is_frozen() -> None:
    request = PublishRequest(
        package_name="com.sample.app",
        track="internal",
        credentials_path=None,
        binaries=(BinaryEntry("app.aab"),),
        is_apk=False,
        verbose=False,
    )
    with pytest.raises(AttributeError):
        request.track = "beta"  # type: ignore[misc]


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (EditState.OPEN, EditState.UPLOADING),
        (EditState.UPLOADING, EditState.VALIDATED),
        (EditState.VALIDATED, EditState.COMMITTED),
        (EditState.OPEN, EditState.ABORTED),
        (EditState.UPLOADING, EditState.ABORTED),
        (EditState.VALIDATED, EditState.ABORTED),
    ],
)
def test_allowed_transitions(current: EditState, target: EditState) -> None:
    assert can_transition(current, target)


@pytest.mark.parametrize(
    ("current", "target"),
    [
        (EditState.OPEN, EditState.COMMITTED),
        (EditState.UPLOADING, EditState.COMMITTED),
        (EditState.COMMITTED, EditState.ABORTED),
        (EditState.ABORTED, EditState.OPEN),
    ],
)
def test_forbidden_transitions(current: EditState, target: EditState) -> None:
    assert not can_transition(current, target)


def test_terminal_states() -> None:
    assert {s for s in EditState if s.is_terminal} == {EditState.COMMITTED, EditState.ABORTED}
