"""Plain-text helpers for building result descriptions."""

import re

DESCRIPTION_MAX_LENGTH = 150

_TAG_PATTERN = re.compile(r"<[^<>]*>")


def strip_html(html: str) -> str:
    """Remove every angle-bracket tag from ``html``.

    Removal repeats until the text stops changing, so fragments such as
    ``<<b>script>`` that only form a tag after an inner tag is removed
    are stripped too.

    Args:
        html: Markup to clean.

    Returns:
        Text with all tag patterns removed.
    """
    previous = None
    text = html
    while text != previous:
        previous = text
        text = _TAG_PATTERN.sub("", text)
    return text


def collapse_whitespace(text: str) -> str:
    return " ".join(text.split())


def truncate(text: str, limit: int = DESCRIPTION_MAX_LENGTH) -> str:
    return text[:limit]


def html_to_plain(html: str) -> str:
    """Strip markup and collapse whitespace."""
    return collapse_whitespace(strip_html(html))
