"""
Layout constants and environment configuration for transcript generation.
"""

import os
import tempfile

from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4

# Page geometry (points)
PAGE_SIZE = A4
MARGIN = 50
HEADER_LINE_HEIGHT = 15
CONTENT_LINE_HEIGHT = 15
LINK_LINE_HEIGHT = CONTENT_LINE_HEIGHT * 1.2
MESSAGE_SPACING = 10  # Vertical space between messages
CONTENT_INDENT = 15  # Indentation for message content relative to header
DATE_SEPARATOR_HEIGHT = 30

# Font sizes
TITLE_FONT_SIZE = 18
BODY_FONT_SIZE = 10
PLACEHOLDER_FONT_SIZE = 9
META_FONT_SIZE = 10
HASH_FONT_SIZE = 8
FOOTER_FONT_SIZE = 8

# Colors
PRIMARY_COLOR = Color(0.17, 0.24, 0.31)  # #2C3E50
SECONDARY_COLOR = Color(0.2, 0.29, 0.37)  # #34495E
TEXT_COLOR = Color(0.2, 0.2, 0.2)
LINK_COLOR = Color(0.1, 0.4, 0.7)
META_COLOR = Color(0.5, 0.5, 0.5)
WARNING_COLOR = Color(0.6, 0, 0)
RULE_COLOR = Color(0.8, 0.8, 0.8)
LIGHT_RULE_COLOR = Color(0.9, 0.9, 0.9)

# Built-in faces used unless TrueType fonts are configured
DEFAULT_FONT = "Times-Roman"
DEFAULT_BOLD_FONT = "Times-Bold"

DOCUMENT_TITLE = "Chat Conversation Transcript"
DOCUMENT_AUTHOR = "Chat Transcript PDF"
SUMMARY_BOOKMARK = "media-summary"
PROXY_PATH = "/api/media/proxy/"

# Environment
MEDIA_BASE_URL = os.getenv("TRANSCRIPT_MEDIA_BASE_URL", "http://localhost:5000")
FONT_PATH = os.getenv("TRANSCRIPT_FONT_PATH")
BOLD_FONT_PATH = os.getenv("TRANSCRIPT_BOLD_FONT_PATH")


def get_media_dirs():
    """
    Directories searched when a media file has to be hashed locally.

    Reads ``TRANSCRIPT_MEDIA_DIRS`` (os.pathsep separated) and falls back to
    the temp directory used by the upload pipeline.

    :return: List of directory paths
    """
    configured = os.getenv("TRANSCRIPT_MEDIA_DIRS")
    if configured:
        return [p for p in configured.split(os.pathsep) if p]
    return [os.path.join(tempfile.gettempdir(), "chat-transcripts", "media")]
