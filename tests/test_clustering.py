from dictone.core import clustering
from dictone.core.clustering import (
    accent_tier_for_score,
    detect_rhyme_schemes,
    find_rhyme_clusters,
)
from dictone.core.models import BASIC_PALETTE, AccentTier, Annotation, SchemeId


SCENARIO = "I see the light\nShining so bright"


def _manual(word, start, scheme=SchemeId.A, line=0):
    return Annotation(word, start, start + len(word), line, scheme, AccentTier.LOW, is_manual=True)


def test_scenario_groups_light_and_bright():
    annotations = detect_rhyme_schemes(SCENARIO, [], 2.0)

    assert [(a.word, a.start_index, a.end_index, a.line_index) for a in annotations] == [
        ("light", 10, 15, 0),
        ("bright", 27, 33, 1),
    ]
    assert {a.scheme for a in annotations} == {SchemeId.A}
    assert [a.accent_tier for a in annotations] == [AccentTier.LOW, AccentTier.HIGH]
    assert not any(a.is_manual for a in annotations)


def test_words_that_do_not_rhyme_get_no_annotations():
    assert detect_rhyme_schemes("cat\ndog", [], 2.0) == []


def test_blank_document_returns_manual_annotations_unchanged():
    manual = [_manual("light", 10)]

    assert detect_rhyme_schemes("", manual, 2.0) == manual
    assert detect_rhyme_schemes("  \n ", manual, 2.0) == manual


def test_bracketed_words_are_excluded():
    document = "I see the light\n[bright]\nShining so bright"

    annotations = detect_rhyme_schemes(document, [], 2.0)

    assert [a.start_index for a in annotations] == [10, 36]


def test_short_words_are_not_clustered():
    assert detect_rhyme_schemes("at cat", [], 2.0) == []
    assert [a.word for a in detect_rhyme_schemes("hat cat", [], 2.0)] == ["hat", "cat"]


def test_manual_annotation_takes_precedence_and_reserves_its_scheme():
    manual = _manual("light", 10, scheme=SchemeId.A)

    annotations = detect_rhyme_schemes(SCENARIO, [manual], 2.0)

    assert annotations[0] == manual
    assert len(annotations) == 2
    automatic = annotations[1]
    assert (automatic.word, automatic.start_index) == ("bright", 27)
    assert automatic.scheme is SchemeId.B
    assert not automatic.is_manual


def test_automatic_annotations_in_input_are_recomputed():
    stale = Annotation("see", 2, 5, 0, SchemeId.C, AccentTier.LOW, is_manual=False)

    annotations = detect_rhyme_schemes(SCENARIO, [stale], 2.0)

    assert stale not in annotations
    assert [a.word for a in annotations] == ["light", "bright"]


def test_clusters_take_schemes_in_discovery_order():
    annotations = detect_rhyme_schemes("cat light hat bright", [], 2.0)

    assert [(a.word, a.scheme) for a in annotations] == [
        ("cat", SchemeId.A),
        ("hat", SchemeId.A),
        ("light", SchemeId.B),
        ("bright", SchemeId.B),
    ]


def test_palette_exhaustion_stops_new_clusters():
    annotations = detect_rhyme_schemes(
        "light bright\ncat hat", [], 2.0, palette=(SchemeId.A,)
    )

    assert [a.word for a in annotations] == ["light", "bright"]


def test_basic_palette_has_eight_schemes():
    assert BASIC_PALETTE[-1] is SchemeId.H
    assert len(BASIC_PALETTE) == 8


def test_sensitivity_controls_membership_and_accent():
    loose = detect_rhyme_schemes("rain lane", [], 2.0)
    assert [a.accent_tier for a in loose] == [AccentTier.LOW, AccentTier.LOW]

    assert detect_rhyme_schemes("rain lane", [], 3.0) == []

    medium = detect_rhyme_schemes("cat cab", [], 2.0)
    assert [a.accent_tier for a in medium] == [AccentTier.LOW, AccentTier.MEDIUM]


def test_reclustering_is_idempotent():
    manual = [_manual("see", 2, scheme=SchemeId.D)]
    document = SCENARIO + "\nWe love the night above"

    first = detect_rhyme_schemes(document, manual, 2.0)
    second = detect_rhyme_schemes(document, first, 2.0)

    assert first == second
    assert detect_rhyme_schemes(document, manual, 2.0) == first


def test_find_rhyme_clusters_exposes_members():
    clusters = find_rhyme_clusters(SCENARIO, 2.0)

    assert len(clusters) == 1
    assert clusters[0].scheme is SchemeId.A
    assert clusters[0].words == ["light", "bright"]
    assert clusters[0].anchor.token.word == "light"


def test_accent_tier_thresholds():
    assert accent_tier_for_score(5.0) is AccentTier.HIGH
    assert accent_tier_for_score(4.0) is AccentTier.HIGH
    assert accent_tier_for_score(3.75) is AccentTier.MEDIUM
    assert accent_tier_for_score(2.5) is AccentTier.MEDIUM
    assert accent_tier_for_score(2.0) is AccentTier.LOW


def test_anchor_takes_the_lowest_tier_and_members_their_score_against_it():
    clusters = find_rhyme_clusters("light bright bite", 2.0)

    members = clusters[0].members
    assert [member.token.word for member in members] == ["light", "bright", "bite"]
    assert members[0].score == 0.0
    assert [member.accent_tier for member in members] == [
        AccentTier.LOW,
        AccentTier.HIGH,
        AccentTier.HIGH,
    ]


def test_each_candidate_is_analysed_once(monkeypatch):
    calls = []
    original = clustering.word_sound

    def counting_word_sound(word):
        calls.append(word)
        return original(word)

    monkeypatch.setattr(clustering, "word_sound", counting_word_sound)

    find_rhyme_clusters("light bright night cat hat", 2.0)

    assert calls == ["light", "bright", "night", "cat", "hat"]
