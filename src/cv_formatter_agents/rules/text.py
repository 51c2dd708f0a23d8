"""Text-level EHS rules: capitalization, phrase cleanup, spelling, bullets."""

from __future__ import annotations

import re

from cv_formatter_core.constants import (
    COMMON_MISTAKES,
    COMPANY_SPECIAL_CASES,
    DEGREE_SPECIAL_CASES,
    REDUNDANT_PHRASES,
    SKILL_SPECIAL_CASES,
    TITLE_LOWERCASE_WORDS,
)

_ENTITY_LOWERCASE_WORDS = TITLE_LOWERCASE_WORDS | {"and"}
_SENTENCE_SPLIT = re.compile(r"(?<=[.!?])\s+(?=[A-Z0-9\"'(])")
_SENTENCE_START = re.compile(r"(^|[.!?:;•\n]\s*)$")
_MULTI_SPACE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT = re.compile(r"\s+([,.;:!?])")

_PHRASE_PATTERNS = [
    (re.compile(rf"\b{re.escape(phrase)}\b[ \t]*(?P<next>\w)?", re.IGNORECASE), residue)
    for phrase, residue in REDUNDANT_PHRASES.items()
]
_MISTAKE_PATTERNS = [
    (re.compile(rf"\b{re.escape(wrong)}\b", re.IGNORECASE), right)
    for wrong, right in COMMON_MISTAKES.items()
]


# --- Capitalization ---


def _cap_part(part: str) -> str:
    return part[:1].upper() + part[1:].lower()


def capitalize_title(value: str) -> str:
    """Capitalize a job title or name.

    Every word (and every hyphenated part) gets an upper-case first letter and
    a lower-case rest; short prepositions and articles stay lower-case unless
    they open the title.
    """
    words = value.split()
    out = []
    for i, word in enumerate(words):
        lowered = word.lower()
        if i > 0 and lowered in TITLE_LOWERCASE_WORDS:
            out.append(lowered)
        else:
            out.append("-".join(_cap_part(p) for p in word.split("-")))
    return " ".join(out)


def _soft_cap(word: str) -> str:
    """Upper-case the first letter without touching the rest (keeps acronyms)."""
    return word[:1].upper() + word[1:]


def _soft_title(value: str, special: dict[str, str]) -> str:
    words = value.split()
    out = []
    for i, word in enumerate(words):
        lowered = word.lower()
        if lowered in special:
            out.append(special[lowered])
        elif i > 0 and lowered in _ENTITY_LOWERCASE_WORDS:
            out.append(lowered)
        else:
            out.append(_soft_cap(word))
    return " ".join(out)


def capitalize_company(value: str) -> str:
    """Apply company special cases (IBM, PwC, KPMG), soft-capitalize the rest."""
    whole = value.strip().lower()
    if whole in COMPANY_SPECIAL_CASES:
        return COMPANY_SPECIAL_CASES[whole]
    return _soft_title(value, COMPANY_SPECIAL_CASES)


def capitalize_institution(value: str) -> str:
    return _soft_title(value, {})


def capitalize_degree(value: str) -> str:
    """Apply degree special cases (PhD, B.Tech, MBA), soft-capitalize the rest."""
    whole = value.strip().lower()
    if whole in DEGREE_SPECIAL_CASES:
        return DEGREE_SPECIAL_CASES[whole]
    return _soft_title(value, DEGREE_SPECIAL_CASES)


def capitalize_skill(value: str) -> str:
    """Apply technology spellings (JavaScript, PostgreSQL, AWS)."""
    whole = value.strip().lower()
    if whole in SKILL_SPECIAL_CASES:
        return SKILL_SPECIAL_CASES[whole]
    return _soft_title(value, SKILL_SPECIAL_CASES)


def capitalize_first(value: str) -> str:
    return _soft_cap(value)


# --- Phrase cleanup ---


def _at_sentence_start(text: str, pos: int) -> bool:
    return bool(_SENTENCE_START.search(text[:pos]))


def _tidy(text: str) -> str:
    text = _MULTI_SPACE.sub(" ", text)
    text = _SPACE_BEFORE_PUNCT.sub(r"\1", text)
    return text.strip()


def _strip_phrases_once(text: str) -> str:
    result = text
    for pattern, residue in _PHRASE_PATTERNS:

        def _replace(m: re.Match[str], residue: str = residue) -> str:
            start = _at_sentence_start(m.string, m.start())
            following = m.group("next") or ""
            if residue:
                lead = residue if start else residue.lower()
                return f"{lead} {following}" if following else lead
            return following.upper() if start else following

        result = pattern.sub(_replace, result)
    return result


def remove_redundant_phrases(text: str) -> str:
    """Remove self-referential phrases ('I am responsible for ...').

    Phrases with a professional residue are rewritten to it ('Responsible
    for'); the others are dropped. The word that follows a dropped phrase is
    capitalized when the phrase opened a sentence. Passes repeat until the
    text stops changing, so back-to-back phrases all go in one call.
    """
    result = text
    while True:
        cleaned = _strip_phrases_once(result)
        if cleaned == result:
            break
        # Every match replaces a phrase with something shorter
        result = _tidy(cleaned)
    return result


def correct_common_mistakes(text: str) -> str:
    """Replace commonly confused words, preserving the original casing."""
    result = text
    for pattern, right in _MISTAKE_PATTERNS:

        def _replace(m: re.Match[str], right: str = right) -> str:
            found = m.group(0)
            if found.isupper() and len(found) > 1:
                return right.upper()
            if found[:1].isupper():
                return right[:1].upper() + right[1:].lower()
            return right.lower()

        result = pattern.sub(_replace, result)
    return result


# --- Bullets ---


def split_into_bullets(text: str, threshold: int) -> list[str]:
    """Split a long multi-sentence block into one bullet per sentence.

    Text at or under the threshold, or made of a single sentence, is kept
    as one bullet.
    """
    if len(text) <= threshold:
        return [text]
    sentences = [s.strip() for s in _SENTENCE_SPLIT.split(text) if s.strip()]
    if len(sentences) < 2:
        return [text]
    return sentences
