"""Serializers rendering repository trees as text, JSON, or Markdown."""

from .base_serializer import TreeSerializer
from .export import export_filename, get_serializer, parse_format, serialize
from .json_serializer import DEFAULT_JSON_INDENT, JSONSerializer
from .markdown_serializer import MarkdownSerializer
from .text_serializer import TextSerializer

__all__ = [
    "DEFAULT_JSON_INDENT",
    "JSONSerializer",
    "MarkdownSerializer",
    "TextSerializer",
    "TreeSerializer",
    "export_filename",
    "get_serializer",
    "parse_format",
    "serialize",
]
