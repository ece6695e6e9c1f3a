"""Read and write meeting records as structured Markdown.

The file is plain Markdown a person can edit by hand, but the layout is a
fixed schema: a header block, then `## ` sections in a fixed order, then a
pipe table of entries and the created/modified stamps.

    **Project:** Apollo

    # Weekly sync

    **Date:** Thursday, 05.02.2026 | **Location:** Room 4

    ---

    ## Recorder

    Anna Beispiel [AB]

    ## Attendees

    - Bob Meier [BM]

    ## Status

    - [x] Draft
    - [ ] Approved

    ## Classification

    - [ ] Public
    - [x] Internal
    - [ ] Confidential
    - [ ] Strictly confidential

    ---

    ## Entries

    | Topic | Kind | Note | Owner | Due |
    |-------|------|------|-------|-----|
    | Budget | DECISION | Approved as planned | | |

    ---

    **Modified:** 05.02.2026 14:00 by Anna Beispiel
"""
import re
from typing import Dict, List, Optional

from .errors import MalformedRow, UnexpectedSection, UnknownEntryKind, UnknownOption
from .types import Entry, EntryKind, MeetingRecord, Person, SecurityLevel, derive_short_code


RULE = "---"
NEWLINE_MARKER = "<br>"
PROJECT_PREFIX = "**Project:**"
DATE_PREFIX = "**Date:**"
LOCATION_PREFIX = "**Location:**"

TABLE_COLUMNS = ["Topic", "Kind", "Note", "Owner", "Due"]
TABLE_HEADER = "| " + " | ".join(TABLE_COLUMNS) + " |"
TABLE_SEPARATOR = "|-------|------|------|-------|-----|"

# Sections in the only order they may appear
HEADER = "Header"
RECORDER = "Recorder"
ATTENDEES = "Attendees"
FOR_INFO = "For Info"
ABOUT = "About"
STATUS = "Status"
CLASSIFICATION = "Classification"
ENTRIES = "Entries"
SECTION_ORDER = [HEADER, RECORDER, ATTENDEES, FOR_INFO, ABOUT, STATUS, CLASSIFICATION, ENTRIES]

STATUS_OPTIONS = {"Draft": "is_draft", "Approved": "is_approved"}
CLASSIFICATION_OPTIONS = {level.label: level for level in SecurityLevel}

CHECKBOX_RE = re.compile(r"^- \[([ xX])\]\s*(.*)$")
METADATA_RE = re.compile(r"^\*\*(Created|Modified):\*\*\s*(.*?)(?:\s+by(?:\s+(.*))?)?$")
SEPARATOR_ROW_RE = re.compile(r"^\|?\s*:?-+:?\s*(\|\s*:?-+:?\s*)*\|?$")
PERSON_RE = re.compile(r"^((?:\\.|[^\\\[\]])*?)\s*(?:\[((?:\\.|[^\\\[\]])*)\])?$")


# ----------------------------
# Escaping
# ----------------------------

def escape_inline(text: str) -> str:
    return re.sub(r"([\\\[\]])", r"\\\1", text)


def unescape_inline(text: str) -> str:
    return re.sub(r"\\(.)", r"\1", text)


def escape_cell(value: str) -> str:
    """
    Make a value safe for one table cell on one physical line.

    Leading and trailing whitespace is backslash-escaped so the padding
    around the cell can be dropped on reading. Carriage returns are
    folded into newlines.
    """
    value = value.replace("\\", "\\\\").replace("|", "\\|")
    value = value.replace(NEWLINE_MARKER, "\\" + NEWLINE_MARKER)
    value = value.replace("\r\n", "\n").replace("\r", "\n").replace("\n", NEWLINE_MARKER)

    body = value.strip()
    if not body:
        return "".join("\\" + ch for ch in value)
    lead = value[:len(value) - len(value.lstrip())]
    trail = value[len(value.rstrip()):]
    return "".join("\\" + ch for ch in lead) + body + "".join("\\" + ch for ch in trail)


def unescape_cell(raw: str) -> str:
    # (char, came from an escape or marker)
    chars = []
    i = 0
    while i < len(raw):
        ch = raw[i]
        if ch == "\\" and i + 1 < len(raw):
            chars.append((raw[i + 1], True))
            i += 2
        elif raw.startswith(NEWLINE_MARKER, i):
            chars.append(("\n", True))
            i += len(NEWLINE_MARKER)
        else:
            chars.append((ch, False))
            i += 1

    start, end = 0, len(chars)
    while start < end and not chars[start][1] and chars[start][0].isspace():
        start += 1
    while end > start and not chars[end - 1][1] and chars[end - 1][0].isspace():
        end -= 1
    return "".join(ch for ch, _ in chars[start:end])


def split_table_row(row: str) -> List[str]:
    """
    Split `| a | b\\|c |` into decoded cells ["a", "b|c"].

    Escaped pipes stay inside their cell; the outer pipes are optional.
    """
    row = row.strip()
    segments = []
    current = []
    chars = iter(row)
    for ch in chars:
        if ch == "\\":
            current.append(ch)
            current.append(next(chars, ""))
        elif ch == "|":
            segments.append("".join(current))
            current = []
        else:
            current.append(ch)
    segments.append("".join(current))

    if row.startswith("|"):
        segments = segments[1:]
    if segments and segments[-1] == "":
        segments = segments[:-1]
    return [unescape_cell(s) for s in segments]


def escape_about_line(line: str) -> str:
    if line.lstrip().startswith(("#", "\\")):
        return "\\" + line
    return line


def unescape_about_line(line: str) -> str:
    return line[1:] if line.startswith("\\") else line


def format_person(person: Person) -> str:
    text = escape_inline(person.name)
    # A leading #, - or * would read as heading, rule or stamp
    if text.startswith(("#", "-", "*")):
        text = "\\" + text
    if person.short_code:
        text = f"{text} [{escape_inline(person.short_code)}]".lstrip()
    return text


def checkbox(checked: bool, label: str) -> str:
    return f"- [{'x' if checked else ' '}] {label}"


# ----------------------------
# Serializer
# ----------------------------

def serialize(record: MeetingRecord) -> str:
    """Render the record in the structured Markdown format."""
    lines: List[str] = []

    if record.project:
        lines += [f"{PROJECT_PREFIX} {record.project}", ""]

    lines += [f"# {record.title}".rstrip(), ""]

    meta = []
    if record.date_text:
        meta.append(f"{DATE_PREFIX} {record.date_text}")
    if record.location:
        meta.append(f"{LOCATION_PREFIX} {record.location}")
    if meta:
        lines += [" | ".join(meta), ""]

    lines += [RULE, ""]

    lines += [f"## {RECORDER}", ""]
    if not record.recorder.is_blank():
        lines += [format_person(record.recorder), ""]

    for heading, people in ((ATTENDEES, record.attendees), (FOR_INFO, record.for_info)):
        if people:
            lines += [f"## {heading}", ""]
            lines += [f"- {format_person(p)}".rstrip() for p in people]
            lines.append("")

    if record.about:
        lines += [f"## {ABOUT}", ""]
        lines += [escape_about_line(line) for line in record.about.split("\n")]
        lines.append("")

    lines += [
        f"## {STATUS}",
        "",
        checkbox(record.is_draft, "Draft"),
        checkbox(record.is_approved, "Approved"),
        "",
        f"## {CLASSIFICATION}",
        "",
    ]
    lines += [checkbox(level == record.security, level.label) for level in SecurityLevel]
    lines.append("")

    if record.entries:
        lines += [RULE, "", f"## {ENTRIES}", "", TABLE_HEADER, TABLE_SEPARATOR]
        for e in record.entries:
            cells = [e.topic, e.kind.table_label, e.note, e.owner_code, e.due]
            lines.append("| " + " | ".join(escape_cell(c) for c in cells) + " |")
        lines.append("")

    lines += [RULE, ""]
    if record.created_at:
        lines += [f"**Created:** {record.created_at} by {record.created_by}".rstrip(), ""]
    if record.modified_at:
        lines += [f"**Modified:** {record.modified_at} by {record.modified_by}".rstrip(), ""]

    return "\n".join(lines)


# ----------------------------
# Parser
# ----------------------------

class MarkdownParser:
    """
    Line-oriented state machine over the sections of one document.

    Only `## ` headings change the state, and only forwards. Values are
    collected in plain fields and turned into a MeetingRecord at the very
    end, so a failing parse never leaves a half-filled record behind.
    """

    def __init__(self, text: str):
        if text.startswith("\ufeff"):
            text = text[1:]
        self.lines = [line.rstrip("\r") for line in text.split("\n")]
        self.section = HEADER
        self.line_no = 0
        self.values: Dict[str, object] = {}
        self.recorder: Optional[Person] = None
        self.attendees: List[Person] = []
        self.for_info: List[Person] = []
        self.about_lines: List[str] = []
        self.status_seen = False
        self.flags = {"is_draft": True, "is_approved": False}
        self.security: Optional[SecurityLevel] = None
        self.entries: List[Entry] = []
        self.table_started = False

        self.handlers = {
            HEADER: self._header_line,
            RECORDER: self._recorder_line,
            ATTENDEES: lambda s: self._person_bullet(s, self.attendees),
            FOR_INFO: lambda s: self._person_bullet(s, self.for_info),
            STATUS: self._status_line,
            CLASSIFICATION: self._classification_line,
            ENTRIES: self._entries_line,
        }

    def parse(self) -> MeetingRecord:
        for line_no, line in enumerate(self.lines, start=1):
            self.line_no = line_no
            stripped = line.strip()

            if stripped.startswith("## "):
                self._enter_section(stripped[3:].strip())
                continue

            if self.section == ABOUT:
                self.about_lines.append(unescape_about_line(line))
                continue

            if not stripped or stripped == RULE:
                continue

            match = METADATA_RE.match(stripped)
            if match:
                kind = match.group(1).lower()
                self.values[f"{kind}_at"] = match.group(2).strip()
                self.values[f"{kind}_by"] = (match.group(3) or "").strip()
                continue

            self.handlers[self.section](stripped)

        return self._build()

    def _error(self, exc_type, message: str):
        return exc_type(message, section=self.section, line_no=self.line_no)

    def _enter_section(self, name: str) -> None:
        if name not in SECTION_ORDER or name == HEADER:
            raise self._error(UnexpectedSection, f"Unknown section heading: {name!r}")
        if SECTION_ORDER.index(name) <= SECTION_ORDER.index(self.section):
            raise self._error(UnexpectedSection, f"Section {name!r} cannot follow {self.section!r}")
        self.section = name
        if name == STATUS:
            self.status_seen = True
            self.flags = {"is_draft": False, "is_approved": False}

    def _header_line(self, stripped: str) -> None:
        if stripped.startswith(PROJECT_PREFIX):
            self.values["project"] = stripped[len(PROJECT_PREFIX):].strip()
        elif stripped == "#":
            self.values["title"] = ""
        elif stripped.startswith("# "):
            self.values["title"] = stripped[2:].strip()
        elif stripped.startswith(LOCATION_PREFIX):
            self.values["location"] = stripped[len(LOCATION_PREFIX):].strip()
        elif stripped.startswith(DATE_PREFIX):
            date_part, sep, location = stripped.partition(" | " + LOCATION_PREFIX)
            self.values["date_text"] = date_part[len(DATE_PREFIX):].strip()
            if sep:
                self.values["location"] = location.strip()
        else:
            raise self._error(MalformedRow, f"Unexpected line in document header: {stripped!r}")

    def _parse_person(self, text: str) -> Person:
        match = PERSON_RE.match(text.strip())
        if not match:
            raise self._error(MalformedRow, f"Cannot read person {text!r}; escape brackets as \\[ \\]")
        name = unescape_inline(match.group(1))
        code = unescape_inline(match.group(2) or "")
        return Person(name=name, short_code=code, short_code_is_manual=code != derive_short_code(name))

    def _recorder_line(self, stripped: str) -> None:
        if self.recorder is not None:
            raise self._error(MalformedRow, "Only one recorder line is allowed")
        self.recorder = self._parse_person(stripped)

    def _person_bullet(self, stripped: str, people: List[Person]) -> None:
        if stripped != "-" and not stripped.startswith("- "):
            raise self._error(MalformedRow, f"Expected a '- ' bullet, got {stripped!r}")
        people.append(self._parse_person(stripped[2:]))

    def _checkbox(self, stripped: str, options) -> tuple:
        match = CHECKBOX_RE.match(stripped)
        if not match:
            raise self._error(MalformedRow, f"Expected a checkbox line, got {stripped!r}")
        label = match.group(2).strip()
        if label not in options:
            raise self._error(UnknownOption, f"Unknown option {label!r}")
        return match.group(1) != " ", options[label]

    def _status_line(self, stripped: str) -> None:
        checked, flag = self._checkbox(stripped, STATUS_OPTIONS)
        self.flags[flag] = checked

    def _classification_line(self, stripped: str) -> None:
        checked, level = self._checkbox(stripped, CLASSIFICATION_OPTIONS)
        if not checked:
            return
        if self.security is not None:
            raise self._error(MalformedRow, "More than one classification is checked")
        self.security = level

    def _entries_line(self, stripped: str) -> None:
        if not stripped.startswith("|"):
            raise self._error(MalformedRow, f"Expected a table row, got {stripped!r}")
        if not self.table_started:
            if SEPARATOR_ROW_RE.match(stripped):
                return
            cells = split_table_row(stripped)
            if [c.lower() for c in cells] == [c.lower() for c in TABLE_COLUMNS]:
                return
        self.table_started = True

        cells = split_table_row(stripped)
        if len(cells) != len(TABLE_COLUMNS):
            raise self._error(MalformedRow, f"Expected {len(TABLE_COLUMNS)} cells, found {len(cells)}")
        try:
            kind = EntryKind.from_table_label(cells[1])
        except UnknownEntryKind as e:
            raise self._error(UnknownEntryKind, e.message) from None
        self.entries.append(Entry(topic=cells[0], kind=kind, note=cells[2], owner_code=cells[3], due=cells[4]))

    def _build(self) -> MeetingRecord:
        about = "\n".join(self.about_lines).strip("\n")
        return MeetingRecord(
            project=self.values.get("project", ""),
            title=self.values.get("title", ""),
            date_text=self.values.get("date_text", ""),
            location=self.values.get("location", ""),
            about=about,
            recorder=self.recorder or Person(),
            attendees=self.attendees,
            for_info=self.for_info,
            is_draft=self.flags["is_draft"],
            is_approved=self.flags["is_approved"],
            security=self.security if self.security is not None else SecurityLevel.INTERNAL,
            entries=self.entries,
            created_at=self.values.get("created_at", ""),
            created_by=self.values.get("created_by", ""),
            modified_at=self.values.get("modified_at", ""),
            modified_by=self.values.get("modified_by", ""),
        )


def parse(text: str) -> MeetingRecord:
    """Read a record from its Markdown form. Raises a FormatError subclass."""
    return MarkdownParser(text).parse()
