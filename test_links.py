"""Tests for link extraction and the printable view."""
import copy

from meeting_minutes import Entry, EntryKind, LinkContext, LinkReference, MeetingRecord, extract_links, prepare_print_view


def test_links_are_numbered_in_order():
    text, context = extract_links("See [Docs](http://a) and [More](http://b).", LinkContext())
    assert text == "See Docs [1] and More [2]."
    assert context.links == [
        LinkReference(index=1, label="Docs", url="http://a"),
        LinkReference(index=2, label="More", url="http://b"),
    ]
    assert context.next_index == 3


def test_numbering_continues_across_texts():
    context = LinkContext()
    first, context = extract_links("[A](http://a)", context)
    second, context = extract_links("no links here", context)
    third, context = extract_links("[B](http://b)", context)
    assert (first, second, third) == ("A [1]", "no links here", "B [2]")
    assert [link.index for link in context.links] == [1, 2]


def test_text_without_links_is_unchanged():
    text, context = extract_links("[not a link] (nope) [](empty)", LinkContext())
    assert text == "[not a link] (nope) [](empty)"
    assert context.links == []


def test_extracting_twice_finds_nothing_new():
    text, context = extract_links("[Docs](http://a)", LinkContext())
    again, context = extract_links(text, context)
    assert again == text
    assert len(context.links) == 1


def test_escaped_paren_in_url():
    text, context = extract_links(r"[Wiki](https://en.wikipedia.org/wiki/Foo_\(bar\)) done", LinkContext())
    assert text == "Wiki [1] done"
    assert context.links[0].url == "https://en.wikipedia.org/wiki/Foo_(bar)"


def test_print_view_reads_about_first(sample_record):
    sample_record.about = "Agenda in [Wiki](http://wiki)"
    view = prepare_print_view(sample_record)
    assert view.about == "Agenda in Wiki [1]"
    assert view.notes[1] == "Send slides\nSee Docs [2]"
    assert [(link.index, link.label) for link in view.links] == [(1, "Wiki"), (2, "Docs")]


def test_print_view_skips_blank_entries_and_leaves_record_alone(sample_record):
    sample_record.entries.insert(0, Entry())
    before = copy.deepcopy(sample_record)

    view = prepare_print_view(sample_record)

    assert len(view.entries) == 3
    assert len(view.notes) == 3
    assert sample_record == before
    assert "[Docs](http://x)" in sample_record.entries[2].note


def test_print_view_of_empty_record():
    view = prepare_print_view(MeetingRecord(entries=[Entry(kind=EntryKind.INFO)]))
    assert view.about == ""
    assert view.notes == [""]
    assert view.links == []
