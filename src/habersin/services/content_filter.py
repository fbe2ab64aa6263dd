"""Profanity detection that sees through spacing, punctuation and leet-speak.

The matcher is intentionally loose: any banned term appearing as a substring of
the normalized text counts, so some innocent words also match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

BANNED_TERMS: tuple[str, ...] = (
    # Turkish insults and their variants
    "amk", "aq", "oç", "piç", "yavşak", "göt", "siktir", "pezevenk",
    "mal", "gerizekalı", "aptal", "salak", "dangalak", "hıyar",
    "orospu", "oruspu", "0rospu", "or0spu", "0r0spu", "orospı",
    "amına", "amina", "am1na", "am!na", "@mina", "@min@",
    "sik", "s1k", "sık", "s!k", "s1kt1r", "sigtir",
    # English
    "fuck", "fck", "f*ck", "fuk", "fucc", "fvck",
    "shit", "sh1t", "sh!t", "sh*t", "$hit",
    "bitch", "b1tch", "b!tch", "b*tch",
    "dick", "d1ck", "d!ck", "d*ck",
    "ass", "@ss", "@s$", "a$$",
    "bastard", "b@stard", "b@st@rd",
    # Hate speech
    "terörist", "terrorist", "şerefsiz", "namussuz", "kahpe",
    # Punctuated variants
    "a.m.k", "a.q", "skt.r", "f.ck", "s.ktir",
    # Spaced variants
    "a m k", "a q", "o ç", "sik tir",
)

_STRIPPED_CHARS = re.compile(r"[.,/#!$%^&*;:{}=\-_`~()]")
_WHITESPACE_RUN = re.compile(r"\s+")
_WHITESPACE = re.compile(r"\s")
_LEET_TABLE = str.maketrans({"1": "i", "3": "e", "4": "a", "0": "o", "5": "s", "7": "t"})


@dataclass(frozen=True)
class NormalizedText:
    """The three views of a text the banned terms are matched against."""

    normalized: str
    no_space: str
    leet: str

    def forms(self) -> tuple[str, str, str]:
        return (self.normalized, self.no_space, self.leet)


def normalize_text(text: str) -> NormalizedText:
    """Derive the normalized, no-space and leet forms of ``text``."""
    normalized = _WHITESPACE_RUN.sub(" ", _STRIPPED_CHARS.sub("", text.lower()))
    no_space = _WHITESPACE.sub("", normalized)
    return NormalizedText(
        normalized=normalized,
        no_space=no_space,
        leet=no_space.translate(_LEET_TABLE),
    )


def find_banned_term(text: str | None, terms: tuple[str, ...] = BANNED_TERMS) -> str | None:
    """Return the first banned term found in ``text``, or None."""
    if not text:
        return None
    forms = normalize_text(text).forms()
    for term in terms:
        if any(term in form for form in forms):
            return term
    return None


def contains_profanity(text: str | None) -> bool:
    """Return True when ``text`` contains a banned term in any derived form."""
    return find_banned_term(text) is not None
