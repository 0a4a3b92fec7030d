"""Tests for file actions and the registry."""

from __future__ import annotations

import logging

import pytest

from cloudfiles.client.actions import FileAction, FileActionRegistry, Node, View


def make_action(action_id: str, order: int = 0, enabled: bool | None = None) -> FileAction:
    """Create a no-op action."""
    return FileAction(
        id=action_id,
        display_name=lambda nodes, view: action_id,
        icon_svg_inline=lambda nodes, view: "<svg/>",
        exec=lambda node, view, session: True,
        enabled=None if enabled is None else (lambda nodes, view: enabled),
        order=order,
    )


class TestNode:
    """Tests for client Node."""

    def test_basename_from_source(self) -> None:
        """basename should be the last segment of the source URL."""
        node = Node(source="https://cloud.test/remote.php/dav/trashbin/alice/trash/a.txt.d1")
        assert node.basename == "a.txt.d1"

    def test_basename_is_decoded(self) -> None:
        """Percent-encoded names should be decoded."""
        node = Node(source="https://cloud.test/remote.php/dav/files/alice/My%20Report.pdf")
        assert node.basename == "My Report.pdf"

    def test_basename_of_folder(self) -> None:
        """A trailing slash should not produce an empty basename."""
        node = Node(source="https://cloud.test/remote.php/dav/files/alice/Photos/")
        assert node.basename == "Photos"


class TestFileActionRegistry:
    """Tests for FileActionRegistry."""

    def test_register_and_get(self) -> None:
        """Registered actions should be retrievable by id."""
        registry = FileActionRegistry()
        action = make_action("download")
        registry.register(action)
        assert registry.get("download") is action

    def test_get_unknown_raises(self) -> None:
        """Unknown ids should raise KeyError."""
        with pytest.raises(KeyError):
            FileActionRegistry().get("missing")

    def test_duplicate_id_keeps_first(self, caplog: pytest.LogCaptureFixture) -> None:
        """A second action with the same id should be ignored and logged."""
        registry = FileActionRegistry()
        first = make_action("restore")
        registry.register(first)

        with caplog.at_level(logging.ERROR):
            registry.register(make_action("restore"))

        assert registry.get("restore") is first
        assert "already registered" in caplog.text

    def test_get_all_sorted_by_order(self) -> None:
        """Actions should be listed by their order hint."""
        registry = FileActionRegistry()
        registry.register(make_action("late", order=10))
        registry.register(make_action("early", order=1))
        assert [a.id for a in registry.get_all()] == ["early", "late"]

    def test_enabled_for_filters(self) -> None:
        """Only enabled actions should be returned."""
        registry = FileActionRegistry()
        registry.register(make_action("always"))
        registry.register(make_action("never", enabled=False))
        nodes = [Node(source="https://cloud.test/a")]
        assert [a.id for a in registry.enabled_for(nodes, View(id="files"))] == ["always"]
