"""Command-line interface for meeting minutes."""
import argparse
import sys
from datetime import date
from pathlib import Path
from typing import List, Optional

from . import export_print_file, load_file, save_file
from .check_dependencies import check_dependencies
from .config import load_config
from .errors import FormatError, RecordError, RenderError
from .fonts import FontResolver
from .types import MeetingRecord, Person, validate_record


def cmd_new(args) -> int:
    record = MeetingRecord.new(date.today())
    record.title = args.title or ""
    record.project = args.project or ""
    if args.recorder:
        record.recorder = Person(name=args.recorder)
    out = args.output_path or Path(record.suggested_filename("md"))
    save_file(record, out)
    print(f"✅ New minutes: {out}")
    return 0


def cmd_check(args) -> int:
    record = load_file(args.input_path)
    print(f"✅ {args.input_path} is valid")
    print(f"   Title: {record.title or '(none)'}")
    print(f"   Recorder: {record.recorder.display_text() or '(none)'}")
    print(f"   Attendees: {len(record.attendees)}, for info: {len(record.for_info)}")
    print(f"   Entries: {len(record.entries)}")
    print(f"   Classification: {record.security.label}")
    return 0


def cmd_format(args) -> int:
    """Load, tidy and save: people sorted, placeholders dropped, stamps updated."""
    record = load_file(args.input_path).compacted()
    record.sort_people()
    validate_record(record)
    record.mark_saved()
    save_file(record, args.output_path or args.input_path)
    return 0


def cmd_export(args) -> int:
    config = load_config()
    if args.page_size:
        config.page_size = args.page_size
    font_dirs = (args.font_dirs or []) + config.font_dirs
    record = load_file(args.input_path)
    record.sort_people()
    validate_record(record)

    out = args.output_path
    if out is None:
        out = args.input_path.with_suffix(".pdf")
    export_print_file(record, out, FontResolver(font_dirs), config)
    return 0


def cmd_doctor(args) -> int:
    font_dirs = (args.font_dirs or []) + load_config().font_dirs
    all_ok, issues = check_dependencies(font_dirs)
    print("✅ Ready to export" if all_ok else "❌ Not ready to export")
    for issue in issues:
        print(f"   - {issue}")
    return 0 if all_ok else 1


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Write meeting minutes as Markdown and export them to PDF"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("new", help="Create an empty minutes file")
    p.add_argument("--out", "--output", dest="output_path", type=Path, help="Path for the new Markdown file")
    p.add_argument("--title", help="Meeting title")
    p.add_argument("--project", help="Project name")
    p.add_argument("--recorder", help="Name of the person keeping the minutes")
    p.set_defaults(func=cmd_new)

    p = sub.add_parser("check", help="Validate a minutes file")
    p.add_argument("--in", "--input", dest="input_path", required=True, type=Path, help="Path to the Markdown file")
    p.set_defaults(func=cmd_check)

    p = sub.add_parser("format", help="Rewrite a minutes file in canonical form")
    p.add_argument("--in", "--input", dest="input_path", required=True, type=Path, help="Path to the Markdown file")
    p.add_argument("--out", "--output", dest="output_path", type=Path, help="Write here instead of in place")
    p.set_defaults(func=cmd_format)

    p = sub.add_parser("export", help="Export a minutes file to PDF")
    p.add_argument("--in", "--input", dest="input_path", required=True, type=Path, help="Path to the Markdown file")
    p.add_argument("--out", "--output", dest="output_path", type=Path, help="Path for the PDF (default: next to the input)")
    p.add_argument("--font-dir", dest="font_dirs", action="append", help="Extra font directory (repeatable)")
    p.add_argument("--page-size", choices=["A4", "letter"], help="Page size (default: A4 or MEETING_MINUTES_PAGE_SIZE)")
    p.set_defaults(func=cmd_export)

    p = sub.add_parser("doctor", help="Check dependencies and PDF fonts")
    p.add_argument("--font-dir", dest="font_dirs", action="append", help="Extra font directory (repeatable)")
    p.set_defaults(func=cmd_doctor)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point."""
    args = build_parser().parse_args(argv)
    try:
        return args.func(args)
    except FileNotFoundError as e:
        print(f"❌ File not found: {e.filename}")
    except FormatError as e:
        print(f"❌ Could not read {args.input_path}: {e}")
    except RecordError as e:
        print(f"❌ {e}")
    except RenderError as e:
        print(f"❌ PDF export failed: {e}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
