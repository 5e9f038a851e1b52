"""Integration tests for the pick-then-drop move flow."""

from __future__ import annotations

import json
from io import StringIO

import pytest

from pipedit.tree import Selector

S = Selector.parse

ABC = {
    "processors": [
        {"set": {"field": "A"}},
        {"set": {"field": "B"}},
        {"set": {"field": "C"}},
    ],
}


def _fields(document: dict, root: str = "processors") -> list[str]:
    return [processor["set"]["field"] for processor in document.get(root, [])]


class TestFlatMoves:
    """Moves within a single three-processor list."""

    def test_pick_middle_drop_above_first(self, make_editor, zone) -> None:
        editor = make_editor(ABC)
        editor.pick(S("processors.1"))
        result = editor.drop(zone(editor, "processors.0"))

        assert result.moved
        assert _fields(editor.serialize()) == ["B", "A", "C"]
        assert editor.interaction_state.is_idle

    def test_pick_middle_drop_below_last(self, make_editor, zone) -> None:
        editor = make_editor(ABC)
        editor.pick(S("processors.1"))
        result = editor.drop(zone(editor, "processors.3"))

        assert result.final == S("processors.2")
        assert _fields(editor.serialize()) == ["A", "C", "B"]

    @pytest.mark.parametrize("destination", ["processors.1", "processors.2"])
    def test_gaps_around_pick_do_nothing(self, make_editor, zone, destination: str) -> None:
        editor = make_editor(ABC)
        editor.pick(S("processors.1"))
        gap = zone(editor, destination)

        assert editor.is_drop_zone_disabled(gap)
        assert editor.drop(gap) is None
        assert _fields(editor.serialize()) == ["A", "B", "C"]
        assert editor.interaction_state.picked.id == editor.store.get(S("processors.1")).id

    def test_repick_then_drop(self, make_editor, zone) -> None:
        """A second pick replaces the first before the drop."""
        editor = make_editor(ABC)
        editor.pick(S("processors.0"))
        editor.pick(S("processors.2"))
        editor.drop(zone(editor, "processors.0"))
        assert _fields(editor.serialize()) == ["C", "A", "B"]

    def test_sequence_of_moves_recomputes_selectors(self, make_editor, zone) -> None:
        editor = make_editor(ABC)
        editor.pick(S("processors.0"))
        editor.drop(zone(editor, "processors.3"))
        editor.pick(S("processors.2"))
        editor.drop(zone(editor, "processors.1"))
        assert _fields(editor.serialize()) == ["B", "A", "C"]


class TestNestedMoves:
    """Moves across roots and failure branches."""

    DOCUMENT = {
        "processors": [
            {"set": {"field": "A"}},
            {
                "set": {
                    "field": "B",
                    "on_failure": [{"set": {"field": "X"}}, {"set": {"field": "Y"}}],
                }
            },
        ],
    }

    def test_move_into_empty_failure_root(self, make_editor, zone) -> None:
        editor = make_editor(self.DOCUMENT)
        editor.pick(S("processors.0"))
        editor.drop(zone(editor, "onFailure.0"))

        document = editor.serialize()
        assert _fields(document) == ["B"]
        assert _fields(document, "on_failure") == ["A"]

    def test_move_whole_subtree(self, make_editor, zone) -> None:
        editor = make_editor(self.DOCUMENT)
        editor.pick(S("processors.1"))
        editor.drop(zone(editor, "processors.0"))

        document = editor.serialize()
        assert _fields(document) == ["B", "A"]
        assert document["processors"][0]["set"]["on_failure"] == [
            {"set": {"field": "X"}},
            {"set": {"field": "Y"}},
        ]

    def test_cannot_drop_into_own_branch(self, make_editor, zone) -> None:
        editor = make_editor(self.DOCUMENT)
        editor.pick(S("processors.1"))
        assert editor.drop(zone(editor, "processors.1.onFailure.0")) is None
        assert editor.serialize() == self.DOCUMENT

    def test_move_out_of_branch_until_empty(self, make_editor, zone) -> None:
        """Emptying a failure branch removes it from the document."""
        editor = make_editor(self.DOCUMENT)
        editor.pick(S("processors.1.onFailure.1"))
        editor.drop(zone(editor, "processors.0"))
        editor.pick(S("processors.2.onFailure.0"))
        editor.drop(zone(editor, "processors.3"))

        document = editor.serialize()
        assert _fields(document) == ["Y", "A", "B", "X"]
        assert "on_failure" not in document["processors"][2]["set"]

    def test_move_into_branch_of_later_sibling(self, make_editor, zone) -> None:
        editor = make_editor(self.DOCUMENT)
        editor.pick(S("processors.0"))
        editor.drop(zone(editor, "processors.1.onFailure.1"))

        document = editor.serialize()
        assert _fields(document) == ["B"]
        assert document["processors"][0]["set"]["on_failure"] == [
            {"set": {"field": "X"}},
            {"set": {"field": "A"}},
            {"set": {"field": "Y"}},
        ]


class TestMoveLogging:
    """Structured log trail of a move."""

    def test_move_leaves_log_trail(self, make_editor, zone, log_output: StringIO) -> None:
        editor = make_editor(ABC)
        editor.pick(S("processors.1"))
        editor.drop(zone(editor, "processors.0"))

        events = [json.loads(line) for line in log_output.getvalue().splitlines()]
        transitions = [e for e in events if e.get("event_type") == "state_transition"]
        mutations = [e["extra"]["operation"] for e in events if e.get("event_type") == "tree_mutation"]

        assert [t["extra"]["to_state"] for t in transitions] == ["move_pending", "idle"]
        assert mutations == ["remove", "insert", "move"]
