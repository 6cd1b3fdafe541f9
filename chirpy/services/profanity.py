"""Profanity filter for post bodies"""

from typing import Iterable

REPLACEMENT = "****"


def clean_body(body: str, banned_words: Iterable[str]) -> str:
    """Replace banned whole words (case-insensitive) with ****.

    Words are split on single spaces, so "Fornax!" is left alone.
    """
    banned = {w.lower() for w in banned_words}
    return " ".join(REPLACEMENT if word.lower() in banned else word for word in body.split(" "))
