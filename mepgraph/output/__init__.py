"""Serializers for traversal trees."""

from .errors import SerializationError
from .formatter import format_summary
from .json_writer import from_json_document, to_json_document
from .xml_writer import build_xml_element, to_xml_document, write_xml_document

__all__ = [
    "SerializationError",
    "format_summary",
    "from_json_document",
    "to_json_document",
    "build_xml_element",
    "to_xml_document",
    "write_xml_document",
]
