from dictone.core.brackets import BracketIndex, scan_bracket_regions
from dictone.core.models import BracketRegion


def test_single_region_spans_through_closing_bracket():
    text = "go [Chorus] now"

    assert scan_bracket_regions(text) == [BracketRegion(3, 11)]


def test_nested_brackets_form_one_region():
    text = "a [x [y] z] b"

    assert scan_bracket_regions(text) == [BracketRegion(2, 11)]


def test_stray_closing_bracket_is_ignored():
    text = "] a [b] ]"

    assert scan_bracket_regions(text) == [BracketRegion(4, 7)]


def test_unclosed_region_runs_to_end():
    text = "verse [ad-lib yeah"

    assert scan_bracket_regions(text) == [BracketRegion(6, len(text))]


def test_no_brackets_means_no_regions():
    assert scan_bracket_regions("plain text") == []
    assert scan_bracket_regions("") == []


def test_index_queries_overlap_partially_and_fully():
    index = BracketIndex.from_text("one [two] three [four]")

    assert len(index) == 2
    assert index.overlaps(5, 8)
    assert index.overlaps(2, 5)
    assert not index.overlaps(0, 3)
    assert not index.overlaps(10, 15)
    assert index.contains(4)
    assert not index.contains(9)
