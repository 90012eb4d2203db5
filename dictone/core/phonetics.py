"""Dictionary-free phonetic normalisation of English word endings.

Words are rewritten through an ordered table of grapheme rules into a coarse
sound spelling, then the rhyme-relevant tail (final vowel sound plus trailing
consonants) is cut off the end. Rules only resolve spellings whose sound is
ambiguous; unambiguous vowel digraphs (``ea``, ``ai``, ``oa``, ``ew``) keep
their spelling and are bridged by the scorer's assonance groups. Tokens the
rules introduce:

``iy`` (light, time)  ``ay`` (eight, lane)  ``ee`` (me, baby, money)
``oh`` (go, most)     ``oo`` (you, true)    ``aow`` (now, out)
``aw`` (caught, lost) ``ur`` (her, bird)    ``shun`` (nation)

Rule order is significant. Later rules assume earlier ones have fired: the
long-o rule for ``most``/``ghost`` must run before the ``-ost`` rule or those
words land in the ``lost`` sound class, silent ``kn`` is only stripped after
the ``ow`` rules so that ``know`` is not read as ``now``, and plural voicing
runs before the magic-e rules so ``place`` does not turn into ``plays``.
"""

from __future__ import annotations

import re
from functools import lru_cache
from typing import Pattern, Tuple


_NON_LETTER_PATTERN = re.compile(r"[^a-z]")

# A vowel sound is a vowel run (y only as its last letter or on its own),
# optionally closed by a glide: "iy", "oh", "aow". The y in "you" is a
# consonant.
TAIL_PATTERN = re.compile(r"((?:[aeiou]+y?|y)[hw]?)([^aeiouy]*)$")

RAW_TAIL_LENGTH = 3


def _rules(*pairs: Tuple[str, str]) -> Tuple[Tuple[Pattern[str], str], ...]:
    return tuple((re.compile(pattern), replacement) for pattern, replacement in pairs)


IRREGULAR_WORD_RULES = _rules(
    (r"^the$", "thu"),
    (r"^eyes?$", "iy"),
    (r"^one$", "wun"),
    (r"^have$", "hav"),
)

SUFFIX_RULES = _rules(
    (r"tion", "shun"),
    (r"(?<=[aeiou])sion", "zhun"),
    (r"sion", "shun"),
    (r"[ct]ious", "shus"),
)

GH_RULES = _rules(
    (r"eigh", "ay"),
    (r"[oa]ugh(?=t)", "aw"),
    (r"augh$", "af"),
    (r"(?<=thr)ough", "oo"),
    (r"(th|d)ough$", r"\1oh"),
    (r"ough$", "uf"),
    (r"igh", "iy"),
    (r"^gh", "g"),
    (r"gh", ""),
)

# Past tense and plural -es endings; each needs a vowel earlier in the word
# so one-syllable words such as "red" or "shed" keep their vowel.
INFLECTION_RULES = _rules(
    (r"ied$", "iyd"),
    (r"(?<=[ao])yed$", "yd"),
    (r"^([a-z]*[aeiouy][a-z]*[td])ed$", r"\1id"),
    (r"^([a-z]*[aeiouy][a-z]*(?:[pkfx]|sh|ch|ss|ck))ed$", r"\1t"),
    (r"^([a-z]*[aeiouy][a-z]*[^aeiouy])ed$", r"\1d"),
    (r"^([a-z]*[aeiouy][a-z]*(?:ss|x|z|sh|ch))es$", r"\1iz"),
)

# Plural and possessive -s after a voiced sound is pronounced z; "bus" and
# "this" keep their s because i/u are not in the voiced set.
VOICING_RULES = _rules(
    (r"(?<=[a-z]{2})([bdgvmnlrwhyaeoj])s$", r"\1z"),
)

SOFT_CONSONANT_RULES = _rules(
    (r"dge", "j"),
    (r"ge$", "je"),
    (r"c(?=[eiy])", "s"),
)

R_COLORED_RULES = _rules(
    (r"eart", "art"),
    (r"(sw|b|p|w)ear(?=[sz]?$)", r"\1air"),
    (r"ear(?=n|th|l)", "ur"),
    (r"ear", "eer"),
    (r"(th|wh)ere$", r"\1air"),
    (r"ere$", "eer"),
    (r"^are$", "ar"),
    (r"are(?=[sz]?$)", "air"),
    (r"[iy]re(?=[sz]?$)", "iyr"),
    (r"ure(?=[sz]?$)", "oor"),
    (r"(y|f|p|c)our", r"\1or"),
    (r"(?:oa|oo|o)re?(?=[sz]?$)", "or"),
    (r"(?<=w)or(?=[^aeiouy])", "ur"),
    (r"(?<=[^aeiouy])(?:er|ir|ur)(?=[^aeiouy]*$)", "ur"),
)

OW_OU_RULES = _rules(
    (r"(^|kn|fl|bl|gr|thr|sh|s)own(?=[sz]?$)", r"\1ohn"),
    (r"^(n|h|c|w|v|b|pl|br|all)ow(?=[sz]?$)", r"\1aow"),
    (r"ow(?=n|d|l$|er)", "aow"),
    (r"(m|h|p|g)ost", r"\1ohst"),
    (r"(y|s|gr|r)ou(?=p|th|te|$)", r"\1oo"),
    (r"ou", "aow"),
    (r"ost", "awst"),
)

VOWEL_DIGRAPH_RULES = _rules(
    (r"ue(?=[sz]?$)", "oo"),
    (r"(fr|j|s|cr|br)ui", r"\1oo"),
    (r"(sh)oe", r"\1oo"),
    (r"oe(?=[sz]?$)", "oh"),
    (r"au", "aw"),
    (r"alk", "awk"),
    (r"all(?=[sz]?$)", "awl"),
    (r"^([^aeiouy]+)ie(?=[sdz]?$)", r"\1iy"),
    (r"iez$", "eez"),
    (r"(?<!th|gr|ob|pr|wh)(?<!h)ey(?=[sz]?$)", "ee"),
    (r"uy", "iy"),
    (r"^([^aeiouy]+)y$", r"\1iy"),
    (r"(?<=[^aeiouy])y$", "ee"),
    (r"^(d|t|wh|tw)o$", r"\1oo"),
    (r"(?<=[^aeiouy])o$", "oh"),
    (r"^([^aeiouy]+)e$", r"\1ee"),
)

# Vowel + single consonant + silent e; the irregular -ove/-ome/-one/-ive
# spellings are settled first.
MAGIC_E_RULES = _rules(
    (r"(l|b|g|h|d)ove(?=[sz]?$)", r"\1uv"),
    (r"(pr|m)ove(?=[sz]?$)", r"\1oov"),
    (r"(s|c)ome(?=[sz]?$)", r"\1um"),
    (r"(d|n)one(?=[sz]?$)", r"\1un"),
    (r"^(g|l)ive(?=[sz]?$)", r"\1iv"),
    (r"(?<![aeiouy])a([^aeiouy])e(?=[sz]?$)", r"ay\1"),
    (r"(?<![aeiouy])[iy]([^aeiouy])e(?=[sz]?$)", r"iy\1"),
    (r"(?<![aeiouy])o([^aeiouy])e(?=[sz]?$)", r"oh\1"),
    (r"(?<![aeiouy])u([^aeiouy])e(?=[sz]?$)", r"oo\1"),
    (r"(?<![aeiouy])e([^aeiouy])e(?=[sz]?$)", r"ee\1"),
)

CONSONANT_RULES = _rules(
    (r"(?<=[^aeiouy])le$", "ul"),
    (r"ph", "f"),
    (r"^kn", "n"),
    (r"^wr", "r"),
    (r"^gn", "n"),
    (r"^ps", "s"),
    (r"mb$", "m"),
    (r"^wh", "w"),
    (r"tch", "ch"),
    (r"ck", "k"),
    (r"qu", "kw"),
    (r"q", "k"),
    (r"x", "ks"),
    (r"c(?!h)", "k"),
)

CLEANUP_RULES = _rules(
    (r"(?<=[^aeiouy])e$", ""),
    (r"([^aeiouy])\1", r"\1"),
)

REWRITE_RULES: Tuple[Tuple[Pattern[str], str], ...] = (
    IRREGULAR_WORD_RULES
    + SUFFIX_RULES
    + GH_RULES
    + INFLECTION_RULES
    + VOICING_RULES
    + SOFT_CONSONANT_RULES
    + R_COLORED_RULES
    + OW_OU_RULES
    + VOWEL_DIGRAPH_RULES
    + MAGIC_E_RULES
    + CONSONANT_RULES
    + CLEANUP_RULES
)


def normalize_word(word: str) -> str:
    """Lower-case ``word`` and drop everything that is not a letter."""

    return _NON_LETTER_PATTERN.sub("", (word or "").lower())


@lru_cache(maxsize=4096)
def phonetic_form(word: str) -> str:
    """Rewrite the whole of ``word`` into its coarse sound spelling."""

    form = normalize_word(word)
    if len(form) < 2:
        return form
    for pattern, replacement in REWRITE_RULES:
        form = pattern.sub(replacement, form)
    return form


@lru_cache(maxsize=4096)
def phonetic_tail(word: str) -> str:
    """Return the rhyme-relevant tail of ``word``.

    Words shorter than two letters come back normalized but otherwise
    untouched. When the rewritten form has no vowel sound at all the last
    three letters of the word stand in for the tail.
    """

    normalized = normalize_word(word)
    if len(normalized) < 2:
        return normalized

    match = TAIL_PATTERN.search(phonetic_form(normalized))
    if match is None:
        return normalized[-RAW_TAIL_LENGTH:]
    return match.group(0)


def split_tail(tail: str) -> Tuple[str, str]:
    """Split a tail into ``(vowel_cluster, consonant_cluster)``.

    A tail without a vowel sound (the raw fallback) has an empty vowel
    cluster and is returned whole as the consonant part.
    """

    match = TAIL_PATTERN.search(tail or "")
    if match is None or match.start() != 0:
        return "", tail or ""
    return match.group(1), match.group(2)


__all__ = [
    "REWRITE_RULES",
    "TAIL_PATTERN",
    "normalize_word",
    "phonetic_form",
    "phonetic_tail",
    "split_tail",
]
