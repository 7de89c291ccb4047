"""
Text utilities for item names.

Used by the BOM line parser for name cleanup and by the inventory matcher
for name comparison.
"""

import re
from typing import Optional

_DASHES = re.compile(r"[-–—]")
_PUNCTUATION = re.compile(r"[,;:@#$%^&*()]")
_WHITESPACE = re.compile(r"\s+")


def collapse_whitespace(text: str) -> str:
    """Collapse runs of whitespace to one space and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def clean_item_name(name: str) -> str:
    """
    Turn a line remnant into a display name.

    - Dashes (-, en dash, em dash) become spaces
    - Punctuation , ; : @ # $ % ^ & * ( ) becomes spaces
    - Whitespace collapses

    "White T-Shirt M -  " → "White T Shirt M"
    """
    name = _DASHES.sub(" ", name)
    name = _PUNCTUATION.sub(" ", name)
    return collapse_whitespace(name)


def remove_word(text: str, word: str, prefix: Optional[str] = None) -> str:
    """
    Remove every whole-word, case-insensitive occurrence of `word`.

    If `prefix` is a regex, an optional occurrence of it directly before
    the word is removed too (e.g. a "size" label before "32"). A word right
    after an apostrophe is kept, so removing "S" leaves "Men's" intact.
    """
    if not word:
        return text
    pattern = re.escape(word)
    if prefix:
        pattern = f"(?:{prefix})?{pattern}"
    return collapse_whitespace(re.sub(rf"(?<!['’])\b{pattern}\b", " ", text, flags=re.IGNORECASE))


def title_case(word: str) -> str:
    """"bLUE" → "Blue"."""
    return word[:1].upper() + word[1:].lower()


def names_equal(a: Optional[str], b: Optional[str]) -> bool:
    """Case-insensitive equality; empty values never match."""
    if not a or not b:
        return False
    return a.strip().lower() == b.strip().lower()


def word_overlap_similarity(str1: str, str2: str) -> float:
    """
    Word-overlap score between two names, 0.0 to 1.0.

    Words of the shorter string count as matched when some word of the
    longer string contains them or is contained by them (substring test).
    The score is matched / max(word counts). Two short, unrelated names
    can score high ("red" vs "redwood"); callers rely on this bias.

    Ties in length are broken by string order so the score is symmetric.
    """
    a = str1.lower()
    b = str2.lower()
    if (len(a), a) >= (len(b), b):
        longer, shorter = a, b
    else:
        longer, shorter = b, a

    if len(longer) == 0:
        return 1.0

    shorter_words = shorter.split()
    longer_words = longer.split()
    denominator = max(len(shorter_words), len(longer_words))
    if denominator == 0:
        return 1.0

    matches = 0
    for word in shorter_words:
        if any(word in other or other in word for other in longer_words):
            matches += 1

    return matches / denominator
