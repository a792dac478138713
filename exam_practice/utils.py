"""Sanitization helpers for authored and generated text."""

import html

import bleach

# Formatting allowed in question text, explanations and reading passages
RICH_TEXT_TAGS = ["b", "i", "u", "em", "strong", "p", "br", "code", "pre", "ul", "ol", "li"]


def sanitize_rich_text(text: str) -> str:
    """Clean question text, explanations and passages down to basic formatting."""
    sanitized = bleach.clean(text or "", tags=RICH_TEXT_TAGS, attributes={}, strip=True)
    return sanitized.strip()


def sanitize_plain_text(text: str) -> str:
    """Remove all markup and return plain text.

    Used for option text, text-encoded answers and AI analysis. Entities are
    decoded so "a < b" survives as typed; consumers escape on render.
    """
    stripped = bleach.clean(text or "", tags=[], strip=True)
    return html.unescape(stripped).strip()
