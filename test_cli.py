"""Tests for the meeting-minutes command line."""
import pytest

from conftest import REPORTLAB_FONTS
from meeting_minutes import Entry, load_file, save, save_file
from meeting_minutes.cli import build_parser, main


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    monkeypatch.delenv("MEETING_MINUTES_FONT_DIRS", raising=False)
    monkeypatch.delenv("MEETING_MINUTES_PAGE_SIZE", raising=False)
    # files created without --out land in the scratch directory
    monkeypatch.chdir(tmp_path)


def test_new_creates_a_loadable_file(tmp_path, capsys):
    out = tmp_path / "minutes.md"
    assert main(["new", "--out", str(out), "--title", "Kickoff", "--recorder", "Anna Beispiel"]) == 0

    record = load_file(out)
    assert record.title == "Kickoff"
    assert record.recorder.short_code == "AB"
    assert "New minutes" in capsys.readouterr().out


def test_check_reports_summary(tmp_path, sample_record, capsys):
    path = save_file(sample_record, tmp_path / "sync.md")
    assert main(["check", "--in", str(path)]) == 0
    out = capsys.readouterr().out
    assert "is valid" in out
    assert "Entries: 3" in out
    assert "Classification: Confidential" in out


def test_check_reports_format_errors(tmp_path, capsys):
    path = tmp_path / "broken.md"
    path.write_text("# T\n\n## Minutes\n", encoding="utf-8")
    assert main(["check", "--in", str(path)]) == 1
    assert "line 3" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    assert main(["check", "--in", str(tmp_path / "nope.md")]) == 1
    assert "File not found" in capsys.readouterr().out


def test_format_sorts_and_stamps(tmp_path, sample_record):
    sample_record.attendees.insert(0, sample_record.attendees.pop())
    sample_record.entries.append(Entry())
    path = save_file(sample_record, tmp_path / "sync.md")

    assert main(["format", "--in", str(path)]) == 0

    record = load_file(path)
    assert [p.name for p in record.attendees] == ["Bob Meier", "Carla Diaz"]
    assert len(record.entries) == 3
    assert record.created_at == "01.02.2026 09:00"
    assert record.modified_by == "Anna Beispiel"
    assert record.modified_at != "05.02.2026 14:00"


def test_format_requires_recorder(tmp_path, capsys):
    out = tmp_path / "new.md"
    main(["new", "--out", str(out)])
    assert main(["format", "--in", str(out)]) == 1
    assert "recorder" in capsys.readouterr().out.lower()


def test_export_writes_pdf(tmp_path, sample_record):
    path = save_file(sample_record, tmp_path / "sync.md")
    assert main(["export", "--in", str(path), "--font-dir", str(REPORTLAB_FONTS)]) == 0
    assert (tmp_path / "sync.pdf").read_bytes().startswith(b"%PDF")


def test_export_reads_page_size_from_env(tmp_path, sample_record, monkeypatch):
    monkeypatch.setenv("MEETING_MINUTES_PAGE_SIZE", "bogus")
    path = save_file(sample_record, tmp_path / "sync.md")
    assert main(["export", "--in", str(path), "--font-dir", str(REPORTLAB_FONTS)]) == 1
    assert main(["export", "--in", str(path), "--font-dir", str(REPORTLAB_FONTS), "--page-size", "letter"]) == 0


def test_parser_requires_a_command():
    with pytest.raises(SystemExit):
        build_parser().parse_args([])


def test_load_config_from_env_file(tmp_path, monkeypatch):
    from meeting_minutes.config import load_config

    # registered so monkeypatch restores them after load_dotenv overrides
    monkeypatch.setenv("MEETING_MINUTES_PAGE_SIZE", "A4")
    monkeypatch.setenv("MEETING_MINUTES_FONT_DIRS", "")
    env_file = tmp_path / ".env"
    env_file.write_text(f"MEETING_MINUTES_PAGE_SIZE=LETTER\nMEETING_MINUTES_FONT_DIRS={tmp_path}\n", encoding="utf-8")

    config = load_config(env_file)
    assert config.page_size == "letter"
    assert config.font_dirs == [str(tmp_path)]


def test_check_dependencies_finds_bundled_font():
    from meeting_minutes.check_dependencies import check_dependencies

    all_ok, issues = check_dependencies([str(REPORTLAB_FONTS)])
    assert all_ok
    assert "PDF font: Vera" in issues


def test_doctor(capsys):
    assert main(["doctor", "--font-dir", str(REPORTLAB_FONTS)]) == 0
    assert "Ready to export" in capsys.readouterr().out


def test_load_file_with_byte_order_mark(tmp_path, sample_record):
    path = tmp_path / "bom.md"
    path.write_text("\ufeff" + save(sample_record), encoding="utf-8")
    assert load_file(path) == sample_record
