"""
Prompt Vocabulary
=================

Theme words and prompt composition for image generation requests.

Words are drawn uniformly and independently for every request, so the
same theme can come up several times in a row.
"""

import random
import re
from typing import Optional, Sequence

VOCABULARY = (
    "snowman",
    "reindeer",
    "christmas tree",
    "gingerbread house",
    "candy cane",
    "snowflake",
    "yule log",
    "holly",
    "mistletoe",
    "sleigh",
    "ornament",
    "nutcracker",
    "penguin",
    "fireplace",
    "mittens",
    "lantern",
    "winter cabin",
    "star",
)

PROMPT_TEMPLATE = (
    "A simple, bold pixel art illustration of a {word}, "
    "bright festive colors on a black background, centered, no text"
)

_SLUG_STRIP = re.compile(r"[^a-z0-9]+")
MAX_SLUG_LENGTH = 80


def choose_word(
    rng: Optional[random.Random] = None,
    vocabulary: Sequence[str] = VOCABULARY,
) -> str:
    """Pick one theme word uniformly at random."""
    if not vocabulary:
        raise ValueError("vocabulary must not be empty")
    return (rng or random).choice(vocabulary)


def build_prompt(word: str) -> str:
    """Compose a generation prompt around a theme word."""
    return PROMPT_TEMPLATE.format(word=word)


def slugify(text: str) -> str:
    """
    Filesystem-safe name derived from free text.

    Lowercases, collapses every run of other characters to a single '-',
    trims to MAX_SLUG_LENGTH. Never returns an empty string.
    """
    slug = _SLUG_STRIP.sub("-", text.lower()).strip("-")
    slug = slug[:MAX_SLUG_LENGTH].rstrip("-")
    return slug or "image"
