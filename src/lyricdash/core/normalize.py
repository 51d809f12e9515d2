"""Lyric text cleanup: section markers on their own lines, bounded blank lines."""

import re

# Both lookarounds test the raw text, so "][" gets a newline from each side.
_BRACKET_EDGE = re.compile(r"(?<!\n)\[|\](?!\n)")
_NEWLINE_RUN = re.compile(r"\n{3,}")


def _pad_bracket(match: "re.Match[str]") -> str:
    return "\n[" if match.group() == "[" else "]\n"


def normalize_lyrics(raw: str) -> str:
    """
    Normalize scraped lyric text for display.

    - A newline goes before every ``[`` and after every ``]``, so section
      markers such as ``[Chorus]`` sit on their own line.
    - Runs of three or more newlines collapse to exactly two.

    Newlines are only inserted where one is not already adjacent to the
    bracket, which keeps the function idempotent.
    """
    if not raw:
        return raw
    text = _BRACKET_EDGE.sub(_pad_bracket, raw)
    return _NEWLINE_RUN.sub("\n\n", text)
