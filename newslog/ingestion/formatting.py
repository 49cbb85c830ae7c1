"""Headline text cleanup."""

import html
import logging
import re

logger = logging.getLogger(__name__)

COMMON_ENTITIES = {
    "&#8217;": "'",
    "&#8216;": "'",
    "&#8220;": '"',
    "&#8221;": '"',
    "&#8211;": "-",
    "&#8212;": "--",
    "&apos;": "'",
    "&quot;": '"',
    "&amp;": "&",
}

_NUMERIC_ENTITY = re.compile(r"&#(\d+);")


def clean_title(title: str) -> str:
    """Replace HTML entities in a headline with plain characters.

    Curly quotes and dashes from the common table become ASCII; everything
    else decodes to the literal character. Returns ``title`` unchanged if
    cleaning fails.
    """
    try:
        cleaned = title
        for entity, replacement in COMMON_ENTITIES.items():
            cleaned = cleaned.replace(entity, replacement)
        cleaned = html.unescape(cleaned)
        return _NUMERIC_ENTITY.sub(lambda m: chr(int(m.group(1))), cleaned)
    except (ValueError, OverflowError, TypeError, AttributeError) as e:
        logger.warning("Error cleaning title %r: %s", str(title)[:50], e)
        return title
