import html
import re

_TAG = re.compile(r"<[^>]+>")
_BLOCK_BREAK = re.compile(r"</?(p|div|br|li|h[1-6])\b[^>]*>", re.IGNORECASE)


def normalize_text(text: str) -> str:
    """Normalize text by standardizing line breaks and whitespace.

    Converts different line break formats to standard newlines,
    collapses multiple spaces/tabs into single spaces, and reduces
    excessive blank lines.

    Args:
        text: Raw text to normalize.

    Returns:
        str: Normalized and trimmed text.
    """
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def strip_html(fragment: str) -> str:
    """Plain text of an HTML fragment on a single line, entities decoded."""
    text = _TAG.sub(" ", _BLOCK_BREAK.sub(" ", fragment))
    return " ".join(html.unescape(text).split())


def truncate_at_word(text: str, max_chars: int, suffix: str = "...") -> str:
    """Cut ``text`` to at most ``max_chars`` characters on a word boundary."""
    if len(text) <= max_chars:
        return text
    cut = text[: max_chars - len(suffix)]
    if " " in cut:
        cut = cut.rsplit(" ", 1)[0]
    return cut.rstrip(" ,.;:") + suffix
