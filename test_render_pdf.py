"""Tests for font resolution and PDF export."""
import io

import pytest
from pypdf import PdfReader

from conftest import REPORTLAB_FONTS
from meeting_minutes import (
    Entry,
    EntryKind,
    ExportConfig,
    FontResolver,
    FontUnavailable,
    LayoutFailure,
    MeetingRecord,
    Person,
    export_print,
    prepare_print_view,
    render_pdf,
)
from meeting_minutes.render_pdf import escape, multiline, split_url


def long_record(rows: int = 120) -> MeetingRecord:
    entries = []
    for i in range(rows):
        kind = EntryKind.TODO if i % 5 == 0 else EntryKind.INFO
        entries.append(Entry(topic=f"Topic {i}", kind=kind, note=f"First line {i}\nSecond line", owner_code="AB", due="01.03.2026"))
    return MeetingRecord(title="Long meeting", recorder=Person(name="Anna Beispiel"), entries=entries)


def test_every_page_has_page_x_of_y(font_resolver):
    result = render_pdf(prepare_print_view(long_record()), font_resolver())
    n = result.total_pages
    assert n > 1
    assert result.footers == [f"Page {k} of {n}" for k in range(1, n + 1)]

    reader = PdfReader(io.BytesIO(result.pdf_bytes))
    assert len(reader.pages) == n
    assert f"Page 1 of {n}" in reader.pages[0].extract_text()
    assert f"Page {n} of {n}" in reader.pages[-1].extract_text()


def test_single_page_document(sample_record, font_resolver):
    result = render_pdf(prepare_print_view(sample_record), font_resolver())
    assert result.total_pages == 1
    assert result.footers == ["Page 1 of 1"]


def test_export_print_returns_pdf(sample_record, font_resolver):
    pdf_bytes = export_print(sample_record, font_resolver)
    assert pdf_bytes.startswith(b"%PDF")

    text = PdfReader(io.BytesIO(pdf_bytes)).pages[0].extract_text()
    assert "Weekly sync" in text
    assert "Links" in text
    assert "http://x" in text


def test_letter_page_size(sample_record, font_resolver):
    pdf_bytes = export_print(sample_record, font_resolver, ExportConfig(page_size="letter"))
    width, height = PdfReader(io.BytesIO(pdf_bytes)).pages[0].mediabox.upper_right
    assert (round(float(width)), round(float(height))) == (612, 792)


def test_unknown_page_size(sample_record, font_resolver):
    with pytest.raises(LayoutFailure):
        export_print(sample_record, font_resolver, ExportConfig(page_size="A3"))


def test_empty_record_still_renders(font_resolver):
    pdf_bytes = export_print(MeetingRecord(), font_resolver)
    assert len(PdfReader(io.BytesIO(pdf_bytes)).pages) == 1


def test_missing_fonts_raise(tmp_path, sample_record):
    resolver = FontResolver([str(tmp_path)], include_defaults=False)
    with pytest.raises(FontUnavailable) as exc:
        export_print(sample_record, resolver)
    assert str(tmp_path) in str(exc.value)


def test_family_without_bold_is_skipped(tmp_path):
    (tmp_path / "Vera.ttf").write_bytes((REPORTLAB_FONTS / "Vera.ttf").read_bytes())
    resolver = FontResolver([str(tmp_path)], families=[("Vera", "Vera.ttf", "VeraBd.ttf")], include_defaults=False)
    assert list(resolver.candidates()) == []
    with pytest.raises(FontUnavailable):
        resolver()


def test_resolver_caches_family(font_resolver):
    first = font_resolver()
    assert font_resolver.resolve() is first
    assert (first.regular, first.bold) == ("Vera", "Vera-Bold")


def test_split_url():
    url = "http://a.example/" + "x" * 120 + "/tail"
    chunks = split_url(url)
    assert chunks == ["http://a.example/" + "x" * 120 + "/", "tail"]
    assert split_url("http://short/") == ["http://short/"]


def test_markup_is_escaped():
    assert escape("a < b & c") == "a &lt; b &amp; c"
    assert multiline("<b>\nline") == "&lt;b&gt;<br/>line"


def assert_footers_match_pages(result):
    n = result.total_pages
    assert result.footers == [f"Page {k} of {n}" for k in range(1, n + 1)]
    assert len(PdfReader(io.BytesIO(result.pdf_bytes)).pages) == n


def test_note_taller_than_a_page_continues_on_next_page(font_resolver):
    note = "\n".join(f"Step {i}: follow up with the supplier" for i in range(120))
    record = MeetingRecord(recorder=Person(name="Anna"), entries=[Entry(kind=EntryKind.TODO, note=note, owner_code="AB")])
    result = render_pdf(prepare_print_view(record), font_resolver())
    assert result.total_pages > 1
    assert_footers_match_pages(result)


def test_about_taller_than_a_page_continues_on_next_page(font_resolver):
    about = "\n".join(f"Background paragraph {i}" for i in range(120))
    record = MeetingRecord(recorder=Person(name="Anna"), about=about, entries=[Entry(topic="Budget", kind=EntryKind.INFO)])
    result = render_pdf(prepare_print_view(record), font_resolver())
    assert result.total_pages > 1
    assert_footers_match_pages(result)
