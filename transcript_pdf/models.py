"""
Data model for transcript generation: messages, media descriptors and the
document aggregate produced by the generator.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

_LOGGER = logging.getLogger(__name__)


class MessageKind(Enum):
    TEXT = "text"
    VOICE = "voice"
    IMAGE = "image"
    ATTACHMENT = "attachment"


class MediaKind(Enum):
    VOICE = "voice"
    IMAGE = "image"
    ATTACHMENT = "attachment"
    DOCUMENT = "document"


@dataclass(frozen=True)
class Message:
    """One chat entry as delivered by the export parser."""

    timestamp: Union[str, datetime]
    sender: str
    content: str = ""
    kind: MessageKind = MessageKind.TEXT
    id: Optional[int] = None
    media_ref: Optional[str] = None
    duration: Optional[float] = None


@dataclass(frozen=True)
class MediaDescriptor:
    """Metadata record for one binary attachment."""

    id: str
    content_type: str = "application/octet-stream"
    kind: MediaKind = MediaKind.ATTACHMENT
    message_id: Optional[int] = None
    original_name: Optional[str] = None
    file_hash: Optional[str] = None
    key: Optional[str] = None


@dataclass(frozen=True)
class ProcessingOptions:
    include_voice_messages: bool = True
    include_images: bool = True
    include_attachments: bool = True
    include_timestamps: bool = True
    highlight_senders: bool = True


@dataclass(frozen=True)
class TranscriptMetadata:
    participants: List[str] = field(default_factory=list)
    source_filename: Optional[str] = None
    source_hash: Optional[str] = None
    # ProcessingOptions, a free-text summary, or None for defaults
    processing_options: Union[ProcessingOptions, str, None] = None
    generated_at: Optional[datetime] = None
    title: Optional[str] = None


@dataclass
class LayoutCursor:
    """Where the next block will be drawn."""

    page_number: int
    y: float


@dataclass
class TranscriptDocument:
    """
    The document aggregate for one generation call.

    Grows while pages are laid out and is sealed once ``pdf_bytes`` is set.
    """

    metadata: TranscriptMetadata
    descriptors: List[MediaDescriptor] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    page_count: int = 0
    pdf_bytes: Optional[bytes] = None

    @property
    def sealed(self):
        return self.pdf_bytes is not None

    def seal(self, pdf_bytes, page_count):
        if self.sealed:
            raise ValueError("Document has already been serialized")
        self.pdf_bytes = pdf_bytes
        self.page_count = page_count


def _optional_str(value):
    # Records come from JSON, so numbers can show up where text is expected
    if value is None or isinstance(value, str):
        return value
    return str(value)


def message_from_dict(data):
    """
    Build a Message from an export-parser record.

    :param data: Dict with keys id, timestamp, sender, content, type, mediaUrl, duration
    :return: Message, or None if the record has an unknown type
    """
    raw_kind = data.get("type") or "text"
    try:
        kind = MessageKind(raw_kind)
    except ValueError:
        _LOGGER.warning(
            f"Skipping message {data.get('id', 'N/A')} with unknown type '{raw_kind}'"
        )
        return None

    return Message(
        id=data.get("id"),
        timestamp=data.get("timestamp", ""),
        sender=_optional_str(data.get("sender")) or "Unknown Sender",
        content=_optional_str(data.get("content")) or "",
        kind=kind,
        media_ref=_optional_str(data.get("mediaUrl")),
        duration=data.get("duration"),
    )


def descriptor_from_dict(data):
    """
    Build a MediaDescriptor from a media-file record.

    The legacy ``pdf`` type is mapped to ``document``.

    :param data: Dict with keys id, messageId, originalName, contentType, fileHash, type, key
    :return: MediaDescriptor, or None if the record has no id
    """
    if data.get("id") is None:
        _LOGGER.warning(f"Skipping media file without id: {data.get('originalName')!r}")
        return None

    raw_kind = data.get("type") or "attachment"
    if raw_kind == "pdf":
        raw_kind = "document"
    try:
        kind = MediaKind(raw_kind)
    except ValueError:
        _LOGGER.warning(
            f"Media file {data.get('id')} has unknown type '{raw_kind}', treating as attachment"
        )
        kind = MediaKind.ATTACHMENT

    return MediaDescriptor(
        id=str(data["id"]),
        message_id=data.get("messageId"),
        original_name=_optional_str(data.get("originalName")),
        content_type=data.get("contentType") or "application/octet-stream",
        file_hash=_optional_str(data.get("fileHash")),
        kind=kind,
        key=_optional_str(data.get("key")),
    )


def options_from_dict(data):
    """
    Build ProcessingOptions from the upload form's camelCase flags.

    :param data: Dict, free-text summary or None
    :return: ProcessingOptions, the string unchanged, or None
    """
    if data is None or isinstance(data, (str, ProcessingOptions)):
        return data
    return ProcessingOptions(
        include_voice_messages=bool(data.get("includeVoiceMessages", True)),
        include_images=bool(data.get("includeImages", True)),
        include_attachments=bool(data.get("includeAttachments", True)),
        include_timestamps=bool(data.get("includeTimestamps", True)),
        highlight_senders=bool(data.get("highlightSenders", True)),
    )
