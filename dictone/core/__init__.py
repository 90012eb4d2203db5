"""Rhyme detection and annotation engine for Dictone."""

from .brackets import BracketIndex, scan_bracket_regions
from .clustering import (
    MIN_CLUSTER_WORD_LENGTH,
    RhymeCluster,
    accent_tier_for_score,
    detect_rhyme_schemes,
    find_rhyme_clusters,
)
from .lines import (
    InternalRhyme,
    LineSummary,
    annotate_lines,
    find_internal_rhymes,
    suggest_accent_tier,
)
from .models import (
    ACCENT_OPACITY,
    BASIC_PALETTE,
    SCHEME_PALETTE,
    SCHEME_SWATCHES,
    AccentTier,
    Annotation,
    BracketRegion,
    SchemeId,
    SchemeStyle,
    SchemeSwatch,
    Token,
)
from .phonetics import normalize_word, phonetic_form, phonetic_tail, split_tail
from .reconciler import reconcile_annotations
from .scorer import (
    RhymeScore,
    WordSound,
    explain_pair,
    explain_sounds,
    rhyme_strength,
    rhymes,
    score_pair,
    score_sounds,
    word_sound,
)
from .tokenizer import LineIndex, iter_document_tokens, iter_tokens, line_index_at, tokenize

__all__ = [
    "ACCENT_OPACITY",
    "AccentTier",
    "Annotation",
    "BASIC_PALETTE",
    "BracketIndex",
    "BracketRegion",
    "InternalRhyme",
    "LineIndex",
    "LineSummary",
    "MIN_CLUSTER_WORD_LENGTH",
    "RhymeCluster",
    "RhymeScore",
    "SCHEME_PALETTE",
    "SCHEME_SWATCHES",
    "SchemeId",
    "SchemeStyle",
    "SchemeSwatch",
    "Token",
    "WordSound",
    "accent_tier_for_score",
    "annotate_lines",
    "detect_rhyme_schemes",
    "explain_pair",
    "explain_sounds",
    "find_internal_rhymes",
    "find_rhyme_clusters",
    "iter_document_tokens",
    "iter_tokens",
    "line_index_at",
    "normalize_word",
    "phonetic_form",
    "phonetic_tail",
    "reconcile_annotations",
    "rhyme_strength",
    "rhymes",
    "scan_bracket_regions",
    "score_pair",
    "score_sounds",
    "split_tail",
    "suggest_accent_tier",
    "tokenize",
    "word_sound",
]
