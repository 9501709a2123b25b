"""Tests for the shared enumerations."""

import pytest

from repotree.types import ExportFormat, NodeKind


@pytest.mark.parametrize(
    "value,expected",
    [
        ("file", NodeKind.FILE),
        ("blob", NodeKind.FILE),
        ("commit", NodeKind.FILE),
        ("folder", NodeKind.FOLDER),
        ("tree", NodeKind.FOLDER),
    ],
)
def test_node_kind_parse(value, expected):
    assert NodeKind.parse(value) is expected


@pytest.mark.parametrize("value", ["dir", "", None, 1, ["tree"]])
def test_node_kind_parse_unknown(value):
    with pytest.raises(ValueError, match="Unknown node type"):
        NodeKind.parse(value)


def test_export_format_values():
    assert [fmt.value for fmt in ExportFormat] == ["text", "json", "markdown"]
