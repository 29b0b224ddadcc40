"""Text helpers for showing note field values in the terminal."""

import html
import re


class TextParser:
    """Centralized text cleanup for display."""

    BR_PATTERN = re.compile(r'<br\s*/?>', re.IGNORECASE)
    HTML_TAG_PATTERN = re.compile(r'<[^>]+>')
    WHITESPACE_PATTERN = re.compile(r'[ \t]+')

    @classmethod
    def to_plain_text(cls, text: str) -> str:
        """
        Turn Anki field HTML into plain text.

        ``<br>`` becomes a newline, other tags are removed and entities decoded.
        """
        if not text:
            return ""
        text = cls.BR_PATTERN.sub("\n", str(text))
        text = cls.HTML_TAG_PATTERN.sub("", text)
        text = html.unescape(text)
        return cls.WHITESPACE_PATTERN.sub(" ", text).strip()

    @classmethod
    def preview(cls, text: str, length: int = 30) -> str:
        """Single-line preview truncated to ``length`` characters."""
        flat = cls.to_plain_text(text).replace("\n", " ")
        return flat[:length]
