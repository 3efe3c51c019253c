"""
Text processing utilities for transcript rendering.
Maps text onto the character set the PDF faces can draw.
"""

import re
import emoji
import logging

_LOGGER = logging.getLogger(__name__)

PLACEHOLDER_CHAR = "?"

# Printable ASCII plus printable Latin-1; everything else is replaced
_UNSAFE_CHARS = re.compile(r"[^\x20-\x7E\xA0-\xFF]")


def replace_emojis_with_names(text):
    """
    Replace emoji with their short names, e.g. a thumbs-up becomes ":thumbs_up:".

    :param text: Text containing emojis
    :return: Text with emojis replaced
    """
    if not emoji.emoji_list(text):
        return text
    return emoji.demojize(text)


def sanitize_text(text):
    """
    Map a single line of text onto the safe character set.

    Tabs become spaces, emoji become their short names and every other
    character outside printable ASCII/Latin-1 becomes PLACEHOLDER_CHAR.
    Applying it twice gives the same result.

    :param text: Text to sanitize (no line breaks expected)
    :return: Sanitized text
    """
    if not text:
        return ""

    text = text.replace("\t", " ")
    text = replace_emojis_with_names(text)
    sanitized, count = _UNSAFE_CHARS.subn(PLACEHOLDER_CHAR, text)
    if count:
        _LOGGER.debug(f"Replaced {count} unsupported character(s) with '{PLACEHOLDER_CHAR}'")
    return sanitized


def split_paragraphs(text):
    """
    Split text on explicit line breaks.

    :param text: Text which may contain \\n or \\r\\n
    :return: List of paragraphs (at least one, possibly empty)
    """
    if not text:
        return [""]
    return text.replace("\r\n", "\n").replace("\r", "\n").split("\n")
