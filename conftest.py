"""Shared fixtures for the meeting minutes tests."""
from pathlib import Path

import pytest
import reportlab

from meeting_minutes import Entry, EntryKind, FontResolver, MeetingRecord, Person, SecurityLevel


# reportlab ships Bitstream Vera (regular + bold), so the tests do not
# depend on system fonts
REPORTLAB_FONTS = Path(reportlab.__file__).resolve().parent / "fonts"


@pytest.fixture
def font_resolver():
    return FontResolver([str(REPORTLAB_FONTS)], families=[("Vera", "Vera.ttf", "VeraBd.ttf")], include_defaults=False)


@pytest.fixture
def sample_record():
    recorder = Person(name="Anna Beispiel")
    return MeetingRecord(
        project="Apollo",
        title="Weekly sync",
        date_text="Thursday, 05.02.2026",
        location="Room 4",
        about="Status of the release.\nSecond line of the description.",
        recorder=recorder,
        attendees=[Person(name="Bob Meier"), Person(name="Carla Diaz", short_code="CDZ", short_code_is_manual=True)],
        for_info=[Person(name="Dieter Engel")],
        is_draft=False,
        is_approved=True,
        security=SecurityLevel.CONFIDENTIAL,
        entries=[
            Entry(topic="Budget", kind=EntryKind.DECISION, note="Approved as planned"),
            Entry(kind=EntryKind.TODO, note="Send slides\nSee [Docs](http://x)", owner_code="BM", due="12.02.2026"),
            Entry(topic="Pipes", kind=EntryKind.INFO, note="a | b"),
        ],
        created_at="01.02.2026 09:00",
        created_by="Anna Beispiel",
        modified_at="05.02.2026 14:00",
        modified_by="Anna Beispiel",
    )
