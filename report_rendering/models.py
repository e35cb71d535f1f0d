"""
Output data models: the requested format and the rendered result envelope.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Union

from .errors import ContentTypeMismatch, UnsupportedFormat


class OutputFormat(str, Enum):
    """Output representations every report can be rendered to."""

    HTML = "HTML"
    CSV = "CSV"
    PDF = "PDF"

    @property
    def mime_type(self) -> str:
        return _MIME_TYPES[self]

    @property
    def extension(self) -> str:
        return self.value.lower()

    @classmethod
    def parse(cls, value) -> "OutputFormat":
        """
        Resolve an enum member or a format name (case-insensitive).

        Raises:
            UnsupportedFormat: If the value names no known format
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            member = cls.__members__.get(value.strip().upper())
            if member is not None:
                return member
        raise UnsupportedFormat(value)


_MIME_TYPES = {
    OutputFormat.HTML: "text/html",
    OutputFormat.CSV: "text/csv",
    OutputFormat.PDF: "application/pdf",
}


@dataclass(frozen=True)
class TextContent:
    """Text payload (HTML or CSV)."""
    text: str


@dataclass(frozen=True)
class BinaryContent:
    """Binary payload (PDF)."""
    data: bytes


Content = Union[TextContent, BinaryContent]


@dataclass(frozen=True)
class ReportOutput:
    """Rendered report: a MIME type plus either text or binary content."""
    mime_type: str
    content: Content

    @classmethod
    def text(cls, output_format: OutputFormat, text: str) -> "ReportOutput":
        return cls(output_format.mime_type, TextContent(text))

    @classmethod
    def binary(cls, output_format: OutputFormat, data: bytes) -> "ReportOutput":
        return cls(output_format.mime_type, BinaryContent(data))

    @property
    def is_binary(self) -> bool:
        return isinstance(self.content, BinaryContent)

    def as_text(self) -> str:
        if isinstance(self.content, TextContent):
            return self.content.text
        raise ContentTypeMismatch("Content is not text")

    def as_bytes(self) -> bytes:
        if isinstance(self.content, BinaryContent):
            return self.content.data
        raise ContentTypeMismatch("Content is not binary")

    def __len__(self) -> int:
        if isinstance(self.content, TextContent):
            return len(self.content.text)
        return len(self.content.data)
