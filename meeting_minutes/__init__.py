"""Meeting minutes: structured Markdown files and printable PDF export."""
from pathlib import Path
from typing import Callable, Optional

from .errors import (
    FontUnavailable,
    FormatError,
    LayoutFailure,
    MalformedRow,
    RecorderMissing,
    RecordError,
    RenderError,
    UnexpectedSection,
    UnknownEntryKind,
    UnknownOption,
)
from .fonts import FontFamily, FontResolver
from .links import LinkContext, PrintView, extract_links, prepare_print_view
from .markdown_codec import parse, serialize
from .render_pdf import RenderResult, render_pdf
from .types import (
    Entry,
    EntryKind,
    ExportConfig,
    LinkReference,
    MeetingRecord,
    Person,
    SecurityLevel,
    activation_policy,
    validate_record,
)


def load(text: str) -> MeetingRecord:
    """Parse Markdown text into a new MeetingRecord. Raises FormatError."""
    return parse(text)


def save(record: MeetingRecord) -> str:
    """Serialize a record to Markdown text."""
    return serialize(record)


def export_print(record: MeetingRecord, font_resolver: Callable[[], FontFamily],
                 config: Optional[ExportConfig] = None) -> bytes:
    """
    Render the record as a PDF.

    Args:
        record: The meeting record (blank placeholder rows are skipped)
        font_resolver: Callable returning a registered FontFamily, usually a FontResolver
        config: Page size and margins

    Returns:
        The PDF file content

    Raises:
        FontUnavailable, LayoutFailure
    """
    fonts = font_resolver()
    view = prepare_print_view(record)
    return render_pdf(view, fonts, config).pdf_bytes


def load_file(path: Path) -> MeetingRecord:
    return load(Path(path).read_text(encoding="utf-8-sig"))


def save_file(record: MeetingRecord, path: Path) -> Path:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(save(record), encoding="utf-8")
    print(f"[INFO] Saved minutes: {path}")
    return path


def export_print_file(record: MeetingRecord, path: Path, font_resolver: Optional[Callable[[], FontFamily]] = None,
                      config: Optional[ExportConfig] = None) -> Path:
    """Export the record to a PDF file. Errors propagate to the caller."""
    config = config or ExportConfig()
    resolver = font_resolver or FontResolver(config.font_dirs)
    pdf_bytes = export_print(record, resolver, config)

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(pdf_bytes)
    print(f"[SUCCESS] PDF created: {path} ({len(pdf_bytes)} bytes)")
    return path


__all__ = [
    "Entry",
    "EntryKind",
    "ExportConfig",
    "FontFamily",
    "FontResolver",
    "FontUnavailable",
    "FormatError",
    "LayoutFailure",
    "LinkContext",
    "LinkReference",
    "MalformedRow",
    "MeetingRecord",
    "Person",
    "PrintView",
    "RecorderMissing",
    "RecordError",
    "RenderError",
    "RenderResult",
    "SecurityLevel",
    "UnexpectedSection",
    "UnknownEntryKind",
    "UnknownOption",
    "activation_policy",
    "export_print",
    "export_print_file",
    "extract_links",
    "load",
    "load_file",
    "prepare_print_view",
    "render_pdf",
    "save",
    "save_file",
    "validate_record",
]
