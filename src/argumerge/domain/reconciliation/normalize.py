"""Text canonicalization used before hashing or comparing text.

Responsibilities of this stage:
- fold case, diacritics, punctuation and whitespace into one canonical form
- stay total (every string normalizes) and idempotent

Both the fingerprint generator and the similarity scorer call
``normalize_text``; nothing else in the engine compares raw text.
"""

from __future__ import annotations

import unicodedata


def normalize_text(text: str) -> str:
    """Return the canonical comparison form of ``text``.

    Steps, in order: NFD-decompose and drop combining marks, lowercase, drop
    every character that is neither a letter, a number nor whitespace, collapse
    whitespace runs to one space, trim.
    """

    decomposed = unicodedata.normalize("NFD", text)
    text = "".join(ch for ch in decomposed if not unicodedata.category(ch).startswith("M"))
    text = text.lower()
    # lower() can reintroduce combining marks ("İ" -> "i̇")
    text = "".join(ch for ch in text if _is_kept(ch))
    return " ".join(text.split())


def _is_kept(ch: str) -> bool:
    if ch.isspace():
        return True
    category = unicodedata.category(ch)
    return category[0] in "LN"
