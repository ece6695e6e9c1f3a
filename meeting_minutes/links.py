"""Turn inline [label](url) links into numbered references for printing."""
import re
from dataclasses import dataclass, field
from typing import List, Tuple

from .types import Entry, LinkReference, MeetingRecord


# label up to the first "]", url up to the first unescaped ")"
LINK_PATTERN = re.compile(r"\[([^\]\n]+)\]\(((?:\\.|[^\\)\n])+)\)")


@dataclass
class LinkContext:
    """Running link numbering for one document."""
    next_index: int = 1
    links: List[LinkReference] = field(default_factory=list)

    def add(self, label: str, url: str) -> int:
        index = self.next_index
        self.links.append(LinkReference(index=index, label=label, url=url))
        self.next_index += 1
        return index


def extract_links(text: str, context: LinkContext) -> Tuple[str, LinkContext]:
    """
    Replace every [label](url) in text with "label [n]".

    Args:
        text: Free text, e.g. an entry note
        context: Numbering shared by the whole document

    Returns:
        Tuple of (rewritten text, the same context with the new links appended)
    """
    def replace(match: "re.Match") -> str:
        label = match.group(1)
        url = re.sub(r"\\(.)", r"\1", match.group(2))
        index = context.add(label, url)
        return f"{label} [{index}]"

    return LINK_PATTERN.sub(replace, text), context


@dataclass
class PrintView:
    """A record plus the link-free texts the PDF shows in its place."""
    record: MeetingRecord
    about: str
    entries: List[Entry]
    notes: List[str]
    links: List[LinkReference]


def prepare_print_view(record: MeetingRecord) -> PrintView:
    """
    Extract links in reading order: about text first, then each entry note.

    Blank placeholder rows are left out. The record itself is not modified.
    """
    context = LinkContext()
    about, context = extract_links(record.about, context)

    entries = [e for e in record.entries if not e.is_blank()]
    notes = []
    for entry in entries:
        note, context = extract_links(entry.note, context)
        notes.append(note)

    return PrintView(record=record, about=about, entries=entries, notes=notes, links=context.links)
