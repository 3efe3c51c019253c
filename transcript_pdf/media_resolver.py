"""
Media resolution for transcript messages.

Maps messages to their media descriptors, decides which URL a media link
points at and derives the labels shown for each attachment.
"""

import math
import os
import re
import logging
from collections import namedtuple
from urllib.parse import urlparse

from .models import MessageKind, MediaKind
from . import settings

_LOGGER = logging.getLogger(__name__)

UNKNOWN_FILE_NAME = "unknown_file"

# Attachment labels by file extension
EXTENSION_LABELS = {
    ".pdf": "PDF",
    ".doc": "Document",
    ".docx": "Document",
    ".xls": "Spreadsheet",
    ".xlsx": "Spreadsheet",
    ".zip": "Archive",
    ".rar": "Archive",
    ".7z": "Archive",
    ".mp4": "Video",
    ".avi": "Video",
    ".mov": "Video",
}

_PROXY_PATH_PATTERN = re.compile(r"^/api/media/proxy/([^/]+)/?$")

LinkTarget = namedtuple("LinkTarget", ["url", "source"])


class MediaResolver:
    """
    Lookup tables from descriptor id and owning message id to descriptor.

    Built fresh for every document. When two descriptors claim the same
    message (or share an id) the first one wins and a warning is recorded.
    """

    def __init__(self, descriptors):
        self._by_id = {}
        self._by_message_id = {}
        self.warnings = []

        for descriptor in descriptors:
            if descriptor.id in self._by_id:
                self._warn(
                    f"Duplicate media id {descriptor.id}; keeping the first descriptor"
                )
                continue
            self._by_id[descriptor.id] = descriptor

            if descriptor.message_id is None:
                continue
            existing = self._by_message_id.get(descriptor.message_id)
            if existing is not None:
                self._warn(
                    f"Message {descriptor.message_id} is claimed by media {existing.id} "
                    f"and {descriptor.id}; using {existing.id}"
                )
                continue
            self._by_message_id[descriptor.message_id] = descriptor

        _LOGGER.info(
            f"Mapped {len(self._by_id)} media records "
            f"({len(self._by_message_id)} by message id)"
        )

    def _warn(self, warning):
        _LOGGER.warning(warning)
        self.warnings.append(warning)

    def by_id(self, descriptor_id):
        return self._by_id.get(descriptor_id)

    def by_message_id(self, message_id):
        return self._by_message_id.get(message_id)

    def for_message(self, message):
        """
        Find the descriptor belonging to a message.

        Tries the owning message id first, then a media reference that names
        a descriptor id directly or through a proxy URL.

        :param message: Message
        :return: MediaDescriptor or None
        """
        if message.id is not None:
            descriptor = self.by_message_id(message.id)
            if descriptor is not None:
                return descriptor

        if message.media_ref:
            descriptor = self._by_id.get(message.media_ref)
            if descriptor is None:
                proxy_id = parse_proxy_media_id(message.media_ref)
                if proxy_id:
                    descriptor = self._by_id.get(proxy_id)
            if descriptor is not None:
                return descriptor

        if message.kind is not MessageKind.TEXT:
            _LOGGER.debug(f"No media file found for {message.kind.value} message {message.id}")
        return None

    def descriptors(self):
        """Distinct descriptors in the order they were supplied."""
        return list(self._by_id.values())


def parse_proxy_media_id(reference):
    """
    Extract the media id from an absolute proxy-style URL.

    :param reference: Media reference string
    :return: Media id, or None if the reference is not a well-formed proxy URL
    """
    if not reference:
        return None
    try:
        parsed = urlparse(reference)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    match = _PROXY_PATH_PATTERN.match(parsed.path)
    return match.group(1) if match else None


def build_proxy_url(base_url, descriptor_id):
    return f"{base_url.rstrip('/')}{settings.PROXY_PATH}{descriptor_id}"


def resolve_link_target(message, descriptor, base_url):
    """
    Decide where a media link points.

    Priority: an absolute proxy URL already on the message, then a proxy URL
    built from the resolved descriptor, then a site-relative reference made
    absolute. Without any of these the link has no URL.

    :param message: Message
    :param descriptor: Resolved MediaDescriptor or None
    :param base_url: Base address for proxy URLs
    :return: LinkTarget(url or None, source)
    """
    if parse_proxy_media_id(message.media_ref):
        return LinkTarget(message.media_ref, "message")

    if descriptor is not None:
        url = build_proxy_url(base_url, descriptor.id)
        _LOGGER.debug(f"Using proxy URL for {message.kind.value} message {message.id} -> {url}")
        return LinkTarget(url, "descriptor")

    if message.media_ref and message.media_ref.startswith("/"):
        url = f"{base_url.rstrip('/')}{message.media_ref}"
        _LOGGER.warning(
            f"Using fallback URL for {message.kind.value} message {message.id} -> {url}"
        )
        return LinkTarget(url, "relative")

    _LOGGER.error(
        f"Cannot generate URL for {message.kind.value} message {message.id} - "
        f"no usable media reference and no media file found"
    )
    return LinkTarget(None, "unresolved")


def media_display_name(message, descriptor):
    """
    Name shown for an attachment: original filename, else the basename of the
    media reference, else UNKNOWN_FILE_NAME.
    """
    if descriptor is not None and descriptor.original_name:
        return descriptor.original_name
    if message.media_ref:
        name = os.path.basename(urlparse(message.media_ref).path.rstrip("/"))
        if name:
            return name
    return UNKNOWN_FILE_NAME


def attachment_label(file_name):
    """
    Human label for an attachment based on its extension.

    :param file_name: File name or path
    :return: Label such as "PDF", "Spreadsheet" or "File"
    """
    ext = os.path.splitext(file_name or "")[1].lower()
    return EXTENSION_LABELS.get(ext, "File")


def message_media_label(message, display_name):
    if message.kind is MessageKind.IMAGE:
        return "Image"
    if message.kind is MessageKind.VOICE:
        return "Voice Message"
    return attachment_label(display_name)


def descriptor_type_label(descriptor):
    """Type column text for the summary table."""
    if descriptor.kind is MediaKind.ATTACHMENT:
        return attachment_label(descriptor.original_name or descriptor.key)
    return descriptor.kind.value.capitalize()


def format_duration(seconds):
    """
    Format seconds as m:ss, rounding down.

    :param seconds: Duration in seconds (None, NaN and negatives give 0:00)
    :return: Formatted duration
    """
    if seconds is None:
        return "0:00"
    try:
        seconds = float(seconds)
    except (TypeError, ValueError):
        return "0:00"
    if math.isnan(seconds) or math.isinf(seconds) or seconds < 0:
        return "0:00"
    minutes = int(seconds // 60)
    remaining_seconds = int(seconds % 60)
    return f"{minutes}:{remaining_seconds:02d}"
