"""Render meeting minutes as a paginated PDF with "Page X of Y" footers."""
import io
from dataclasses import dataclass, field
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import mm
from reportlab.platypus import BaseDocTemplate, Frame, PageTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.platypus.doctemplate import LayoutError
from reportlab.platypus.flowables import HRFlowable

from .errors import LayoutFailure
from .fonts import FontFamily
from .links import PrintView
from .types import EntryKind, ExportConfig, Person, SecurityLevel


PAGE_SIZES = {"A4": A4, "letter": letter}

RULE_COLOR = colors.HexColor("#B4B4B4")
TODO_FILL = colors.HexColor("#DCDCDC")
ROW_FILL = colors.white

INFO_COL_RATIO = [3, 11]
ENTRY_COL_RATIO = [3, 5, 13, 4, 4]
ENTRY_HEADERS = ["Topic", "Kind", "Note", "Owner", "Due"]
URL_CHUNK = 100
FOOTER_FONT_SIZE = 9
FOOTER_Y = 15 * mm


def escape(s: str) -> str:
    """Escape HTML entities for ReportLab."""
    return str(s).replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


def multiline(s: str) -> str:
    return "<br/>".join(escape(line) for line in s.split("\n"))


def split_url(url: str, limit: int = URL_CHUNK) -> List[str]:
    """Break a long URL after a "/" once a chunk is longer than limit."""
    chunks = []
    current = ""
    for ch in url:
        current += ch
        if ch == "/" and len(current) > limit:
            chunks.append(current)
            current = ""
    if current:
        chunks.append(current)
    return chunks


class PageFooter:
    """
    onPage hook stamping "Page X of Y" into the bottom margin.

    reportlab calls it on the bare page canvas before any frame content is
    drawn, so the stamp sits outside the content area and is never clipped.
    Without total_pages it only counts pages (the counting pass).
    """

    def __init__(self, font_name: str, total_pages: Optional[int] = None):
        self.font_name = font_name
        self.total_pages = total_pages
        self.pages = 0
        self.stamps: List[str] = []

    def __call__(self, canvas, doc) -> None:
        self.pages += 1
        if self.total_pages is None:
            return
        text = f"Page {canvas.getPageNumber()} of {self.total_pages}"
        page_width = doc.pagesize[0]
        canvas.saveState()
        canvas.setFont(self.font_name, FOOTER_FONT_SIZE)
        canvas.drawRightString(page_width - doc.rightMargin, FOOTER_Y, text)
        canvas.restoreState()
        self.stamps.append(text)


@dataclass
class RenderResult:
    """Result of rendering a PDF."""
    pdf_bytes: bytes
    total_pages: int
    footers: List[str] = field(default_factory=list)


def make_styles(fonts: FontFamily) -> dict:
    base = getSampleStyleSheet()
    return {
        "Small": ParagraphStyle(name="Small", parent=base["BodyText"], fontName=fonts.regular, fontSize=9, leading=11),
        "SmallBold": ParagraphStyle(name="SmallBold", parent=base["BodyText"], fontName=fonts.bold, fontSize=9, leading=11),
        "Title": ParagraphStyle(name="Title", parent=base["Heading1"], fontName=fonts.bold, fontSize=20, leading=24, spaceAfter=4),
        "Tiny": ParagraphStyle(name="Tiny", parent=base["BodyText"], fontName=fonts.regular, fontSize=7, leading=9),
        "TinyUrl": ParagraphStyle(name="TinyUrl", parent=base["BodyText"], fontName=fonts.regular, fontSize=7, leading=9, leftIndent=3.5 * mm),
    }


def _rule():
    return HRFlowable(width="100%", thickness=0.5, color=RULE_COLOR, spaceBefore=2, spaceAfter=6)


def _people_text(people: List[Person]) -> str:
    return ", ".join(p.display_text() for p in people if not p.is_blank())


def _checkbox_table(labels: List[str], width: float, style: ParagraphStyle) -> Table:
    cells = [Paragraph(escape(label), style) for label in labels]
    cells += [""] * (4 - len(cells))
    table = Table([cells], colWidths=[width / 4] * 4)
    table.setStyle(TableStyle([
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("RIGHTPADDING", (0, 0), (-1, -1), 0),
        ("TOPPADDING", (0, 0), (-1, -1), 0),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 0),
    ]))
    return table


def _mark(checked: bool, label: str) -> str:
    return f"[x] {label}" if checked else f"[  ] {label}"


def build_story(view: PrintView, fonts: FontFamily, width: float) -> list:
    """
    Build the flowables for one render pass.

    Flowables keep layout state once drawn, so every pass needs a fresh
    story from this function.
    """
    record = view.record
    styles = make_styles(fonts)
    small, small_bold = styles["Small"], styles["SmallBold"]
    story = []

    if record.project:
        story.append(Paragraph(escape(record.project), small))
    story.append(Paragraph(escape(record.title), styles["Title"]))
    story.append(Spacer(1, 4))

    meta = []
    if record.date_text:
        meta.append(f"Date: {record.date_text}")
    if record.location:
        meta.append(f"Location: {record.location}")
    if meta:
        story.append(Paragraph(escape("  |  ".join(meta)), small))
        story.append(Spacer(1, 4))
    story.append(_rule())

    # Info block as a two column table so the values line up
    label_w, value_w = [width * r / sum(INFO_COL_RATIO) for r in INFO_COL_RATIO]
    rows = []
    if not record.recorder.is_blank():
        rows.append(("Recorder", Paragraph(escape(record.recorder.display_text()), small)))
    attendees = _people_text(record.attendees)
    if attendees:
        rows.append(("Attendees", Paragraph(escape(attendees), small)))
    for_info = _people_text(record.for_info)
    if for_info:
        rows.append(("For Info", Paragraph(escape(for_info), small)))
    if view.about:
        rows.append(("About", Paragraph(multiline(view.about), small)))
    rows.append(("Status", _checkbox_table(
        [_mark(record.is_draft, "Draft"), _mark(record.is_approved, "Approved")], value_w, small)))
    rows.append(("Classification", _checkbox_table(
        [_mark(level == record.security, level.label) for level in SecurityLevel], value_w, small)))

    # splitInRow lets a long About text continue on the next page
    info = Table([[Paragraph(label, small_bold), value] for label, value in rows],
                 colWidths=[label_w, value_w], splitInRow=1)
    info.setStyle(TableStyle([
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LEFTPADDING", (0, 0), (-1, -1), 0),
        ("TOPPADDING", (0, 0), (-1, -1), 1 * mm),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 1 * mm),
    ]))
    story.append(info)
    story.append(Spacer(1, 4))
    story.append(_rule())

    if view.entries:
        story.append(_entries_table(view, styles, width))

    if view.links:
        story.append(Spacer(1, 10))
        story.append(Paragraph("Links", small_bold))
        story.append(Spacer(1, 3))
        for link in view.links:
            story.append(Paragraph(escape(f"[{link.index}] {link.label}:"), styles["Tiny"]))
            for chunk in split_url(link.url):
                story.append(Paragraph(escape(chunk), styles["TinyUrl"]))

    return story


def _entries_table(view: PrintView, styles: dict, width: float) -> Table:
    small, small_bold = styles["Small"], styles["SmallBold"]
    col_widths = [width * r / sum(ENTRY_COL_RATIO) for r in ENTRY_COL_RATIO]

    data = [[Paragraph(h, small_bold) for h in ENTRY_HEADERS]]
    commands = [
        ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ("LINEBELOW", (0, 0), (-1, 0), 0.5, RULE_COLOR),
        ("LEFTPADDING", (0, 0), (-1, -1), 2 * mm),
        ("RIGHTPADDING", (0, 0), (-1, -1), 2 * mm),
        ("TOPPADDING", (0, 0), (-1, -1), 1.5 * mm),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2 * mm),
    ]

    for row, (entry, note) in enumerate(zip(view.entries, view.notes), start=1):
        is_todo = entry.kind is EntryKind.TODO
        style = small_bold if is_todo else small
        kind = ""
        if entry.kind is not EntryKind.EMPTY:
            kind = f'<font color="{entry.kind.color}">{escape(entry.kind.table_label)}</font>'
        data.append([
            Paragraph(escape(entry.topic), style),
            Paragraph(kind, style),
            Paragraph(multiline(note), style),
            Paragraph(escape(entry.owner_code), style),
            Paragraph(escape(entry.due), style),
        ])
        # Todo rows are highlighted, every other row is painted white
        commands.append(("BACKGROUND", (0, row), (-1, row), TODO_FILL if is_todo else ROW_FILL))

    table = Table(data, colWidths=col_widths, repeatRows=1, splitInRow=1)
    table.setStyle(TableStyle(commands))
    return table


def _pdf_title(view: PrintView) -> str:
    if view.record.title:
        return f"{view.record.title} - Meeting Minutes"
    return "Meeting Minutes"


def _render_pass(buffer, view: PrintView, fonts: FontFamily, config: ExportConfig, footer: PageFooter) -> None:
    doc = BaseDocTemplate(
        buffer,
        pagesize=PAGE_SIZES[config.page_size],
        leftMargin=config.margin_left_mm * mm,
        rightMargin=config.margin_right_mm * mm,
        topMargin=config.margin_top_mm * mm,
        bottomMargin=config.margin_bottom_mm * mm,
        title=_pdf_title(view),
        author=view.record.recorder.name,
        invariant=1,
    )
    frame = Frame(doc.leftMargin, doc.bottomMargin, doc.width, doc.height, id="content",
                  leftPadding=0, rightPadding=0, topPadding=0, bottomPadding=0)
    doc.addPageTemplates([PageTemplate(id="minutes", frames=[frame], onPage=footer)])
    try:
        doc.build(build_story(view, fonts, doc.width))
    except LayoutError as e:
        raise LayoutFailure(f"Could not lay out the minutes: {e}") from e


def render_pdf(view: PrintView, fonts: FontFamily, config: Optional[ExportConfig] = None) -> RenderResult:
    """
    Render the PDF in two passes.

    The page total is only known after a full layout, so the first pass
    renders into a throwaway buffer just to count pages. The second pass
    renders the same story again with the total stamped into every footer.

    Args:
        view: Record with links already extracted
        fonts: Registered font family
        config: Page size and margins (default A4)

    Returns:
        RenderResult with the PDF bytes, page total and the footer texts
    """
    config = config or ExportConfig()
    if config.page_size not in PAGE_SIZES:
        raise LayoutFailure(f"Unknown page size: {config.page_size!r}")

    counter = PageFooter(fonts.regular)
    _render_pass(io.BytesIO(), view, fonts, config, counter)
    total_pages = counter.pages

    footer = PageFooter(fonts.regular, total_pages=total_pages)
    buffer = io.BytesIO()
    _render_pass(buffer, view, fonts, config, footer)
    if footer.pages != total_pages:
        raise LayoutFailure(f"Counting pass found {total_pages} pages, final pass produced {footer.pages}")

    return RenderResult(pdf_bytes=buffer.getvalue(), total_pages=total_pages, footers=footer.stamps)
