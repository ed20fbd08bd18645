"""Text utilities for preview and summary generation."""

ELLIPSIS = "..."
PARAGRAPH_BREAK = "\n\n"


def make_preview(text: str, max_chars: int) -> str:
    """
    Cut text down to at most `max_chars` characters.

    Text that fits is returned trimmed. Longer text is truncated, backed off
    to the last space inside the cut when there is one, and suffixed with an
    ellipsis, so the result never exceeds `max_chars + len(ELLIPSIS)`.
    """
    trimmed = text.strip()
    if len(trimmed) <= max_chars:
        return trimmed

    preview = trimmed[:max_chars]
    last_space = preview.rfind(" ")
    if last_space != -1:
        preview = preview[:last_space]

    return preview + ELLIPSIS


def make_summary(text: str, max_chars: int) -> str:
    """
    Derive a bounded summary from extracted text.

    The first paragraph (everything before the first blank line) is used
    verbatim when it fits within `max_chars`; otherwise falls back to
    `make_preview` over the whole trimmed text.

    Args:
        text: Full extracted text
        max_chars: Summary bound

    Returns:
        Summary string of at most `max_chars` plus the ellipsis marker
    """
    trimmed = text.strip()

    paragraph_end = trimmed.find(PARAGRAPH_BREAK)
    if paragraph_end != -1:
        first_paragraph = trimmed[:paragraph_end]
        if len(first_paragraph) <= max_chars:
            return first_paragraph

    return make_preview(trimmed, max_chars)
