"""Type definitions for meeting records and their export."""
import copy
import re
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

from .errors import RecorderMissing, UnknownEntryKind


WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
TIMESTAMP_FMT = "%d.%m.%Y %H:%M"


def derive_short_code(name: str) -> str:
    """First letter of every word in the name, uppercased ("Anna Beispiel" -> "AB")."""
    return "".join(word[0].upper() for word in name.split())


@dataclass
class Person:
    """A participant: recorder, attendee or for-info recipient."""
    name: str = ""
    short_code: str = ""
    # Editing state only, not part of equality
    short_code_is_manual: bool = field(default=False, compare=False)

    def __post_init__(self):
        if not self.short_code_is_manual:
            self.short_code = derive_short_code(self.name)

    def __setattr__(self, key, value):
        super().__setattr__(key, value)
        # plain assignment to name keeps a derived code in sync
        if key == "name" and not self.__dict__.get("short_code_is_manual", False):
            super().__setattr__("short_code", derive_short_code(value))

    def rename(self, name: str) -> None:
        self.name = name

    def set_short_code(self, code: str) -> None:
        """Set the code by hand; auto-derivation stops for good."""
        self.short_code = code
        self.short_code_is_manual = True

    def is_blank(self) -> bool:
        return not self.name.strip() and not self.short_code.strip()

    def display_text(self) -> str:
        if self.short_code:
            return f"{self.name} [{self.short_code}]"
        return self.name


@dataclass(frozen=True)
class FieldActivation:
    """Which entry fields are editable/printed for a kind."""
    topic_active: bool
    note_active: bool
    owner_active: bool
    due_active: bool


class EntryKind(Enum):
    """Category of an entry row. Value is the label used in tables."""
    EMPTY = ""
    ABORTED = "ABORTED"
    AGENDA = "AGENDA"
    DECISION = "DECISION"
    DONE = "DONE"
    IDEA = "IDEA"
    INFO = "INFO"
    TODO = "TODO"

    @property
    def table_label(self) -> str:
        return self.value

    @property
    def label(self) -> str:
        """Label for pickers; the empty kind shows a dash."""
        return self.value or "—"

    @property
    def color(self) -> str:
        return KIND_COLORS[self]

    @classmethod
    def from_table_label(cls, label: str) -> "EntryKind":
        try:
            return cls(label.strip())
        except ValueError:
            raise UnknownEntryKind(f"Unknown entry kind: {label.strip()!r}") from None


KIND_COLORS = {
    EntryKind.EMPTY: "#969696",
    EntryKind.ABORTED: "#E74C3C",
    EntryKind.AGENDA: "#9B59B6",
    EntryKind.DECISION: "#3498DB",
    EntryKind.DONE: "#2ECC71",
    EntryKind.IDEA: "#F1C40F",
    EntryKind.INFO: "#969696",
    EntryKind.TODO: "#E67E22",
}

_TODO_FIELDS = FieldActivation(topic_active=False, note_active=True, owner_active=True, due_active=True)
_DEFAULT_FIELDS = FieldActivation(topic_active=True, note_active=True, owner_active=False, due_active=False)


def activation_policy(kind: EntryKind) -> FieldActivation:
    return _TODO_FIELDS if kind is EntryKind.TODO else _DEFAULT_FIELDS


@dataclass
class Entry:
    """One row of the minutes table."""
    topic: str = ""
    kind: EntryKind = EntryKind.EMPTY
    note: str = ""  # may contain newlines and [label](url) links
    owner_code: str = ""
    due: str = ""  # DD.MM.YYYY, free text

    def set_kind(self, kind: EntryKind) -> None:
        """Change the kind. Switching to TODO drops the topic right away."""
        self.kind = kind
        if not activation_policy(kind).topic_active:
            self.topic = ""

    def is_blank(self) -> bool:
        return not self.topic and not self.note and self.kind is EntryKind.EMPTY


class SecurityLevel(IntEnum):
    """Classification of the minutes, lowest to highest."""
    PUBLIC = 0
    INTERNAL = 1
    CONFIDENTIAL = 2
    STRICTLY_CONFIDENTIAL = 3

    @property
    def label(self) -> str:
        return SECURITY_LABELS[self]


SECURITY_LABELS = {
    SecurityLevel.PUBLIC: "Public",
    SecurityLevel.INTERNAL: "Internal",
    SecurityLevel.CONFIDENTIAL: "Confidential",
    SecurityLevel.STRICTLY_CONFIDENTIAL: "Strictly confidential",
}


def default_date_text(today: date) -> str:
    """e.g. "Thursday, 05.02.2026"."""
    return f"{WEEKDAYS[today.weekday()]}, {today.day:02d}.{today.month:02d}.{today.year}"


def _person_sort_key(person: Person) -> Tuple[bool, str]:
    return (not person.name.strip(), person.name.lower())


@dataclass
class MeetingRecord:
    """The whole meeting record. Owns every nested Person and Entry."""
    project: str = ""
    title: str = ""
    date_text: str = ""
    location: str = ""
    about: str = ""
    recorder: Person = field(default_factory=Person)
    attendees: List[Person] = field(default_factory=list)
    for_info: List[Person] = field(default_factory=list)
    is_draft: bool = True
    is_approved: bool = False
    security: SecurityLevel = SecurityLevel.INTERNAL
    entries: List[Entry] = field(default_factory=list)
    created_at: str = ""
    created_by: str = ""
    modified_at: str = ""
    modified_by: str = ""

    @classmethod
    def new(cls, today: Optional[date] = None) -> "MeetingRecord":
        """Fresh document with one placeholder row in each list."""
        today = today or date.today()
        return cls(
            date_text=default_date_text(today),
            attendees=[Person()],
            for_info=[Person()],
            entries=[Entry()],
        )

    def sort_people(self) -> None:
        """Sort attendees and for-info by name; blank rows go last."""
        self.attendees.sort(key=_person_sort_key)
        self.for_info.sort(key=_person_sort_key)

    def known_short_codes(self) -> List[str]:
        codes = {p.short_code for p in [self.recorder, *self.attendees, *self.for_info] if p.short_code}
        return sorted(codes)

    def compacted(self) -> "MeetingRecord":
        """Copy without placeholder persons and entries."""
        record = copy.deepcopy(self)
        record.attendees = [p for p in record.attendees if not p.is_blank()]
        record.for_info = [p for p in record.for_info if not p.is_blank()]
        record.entries = [e for e in record.entries if not e.is_blank()]
        return record

    def mark_saved(self, now: Optional[datetime] = None) -> None:
        stamp = (now or datetime.now()).strftime(TIMESTAMP_FMT)
        if not self.created_at:
            self.created_at = stamp
            self.created_by = self.recorder.name
        self.modified_at = stamp
        self.modified_by = self.recorder.name

    def suggested_filename(self, extension: str = "md", today: Optional[date] = None) -> str:
        name_part = re.sub(r"[^\w]|[\d_]", "", self.title)
        today = today or date.today()
        return f"Minutes_{name_part}__{today.isoformat()}.{extension}"


def validate_record(record: MeetingRecord) -> None:
    """Raise RecorderMissing if nobody is named as recorder."""
    if not record.recorder.name.strip():
        raise RecorderMissing("A recorder is required before saving or exporting")


@dataclass
class LinkReference:
    """A numbered hyperlink collected for the printable appendix."""
    index: int
    label: str
    url: str


@dataclass
class ExportConfig:
    """Configuration for PDF export."""
    page_size: str = "A4"  # "A4" or "letter"
    font_dirs: List[str] = field(default_factory=list)  # searched before the defaults
    margin_top_mm: float = 20.0
    margin_bottom_mm: float = 20.0
    margin_left_mm: float = 15.0
    margin_right_mm: float = 15.0
