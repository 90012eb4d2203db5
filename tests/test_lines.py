from dictone.core.lines import annotate_lines, find_internal_rhymes, suggest_accent_tier
from dictone.core.models import AccentTier


def test_annotate_lines_summarises_each_line():
    summaries = annotate_lines("I see the light\nShining so bright")

    assert [summary.line_index for summary in summaries] == [0, 1]
    assert summaries[1].start_index == 16
    assert summaries[1].text == "Shining so bright"
    assert [token.start_index for token in summaries[1].tokens] == [16, 24, 27]
    assert summaries[0].syllable_count == 4
    assert summaries[1].syllable_count == 4
    assert summaries[1].last_token.word == "bright"


def test_bracketed_words_add_no_syllables():
    summaries = annotate_lines("[Chorus]\nwonderful [yeah yeah] day")

    assert summaries[0].tokens == ()
    assert summaries[0].syllable_count == 0
    assert [token.word for token in summaries[1].tokens] == ["wonderful", "day"]
    assert summaries[1].syllable_count == 4


def test_empty_document_is_one_empty_line():
    summaries = annotate_lines("")

    assert len(summaries) == 1
    assert summaries[0].tokens == ()
    assert summaries[0].last_token is None


def test_internal_rhymes_stay_within_a_line():
    pairs = find_internal_rhymes("the cat sat down\nlight\nbright")

    assert [(pair.line_index, pair.first.word, pair.second.word) for pair in pairs] == [
        (0, "cat", "sat"),
    ]
    assert pairs[0].score == 4.5


def test_suggest_accent_tier_by_syllables():
    assert suggest_accent_tier("wonderful") is AccentTier.HIGH
    assert suggest_accent_tier("shining") is AccentTier.MEDIUM
    assert suggest_accent_tier("light") is AccentTier.LOW
