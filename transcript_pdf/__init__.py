"""
Chat transcript PDF engine.
Lays out parsed chat exports as paginated PDFs with clickable media links
and a closing media authentication summary.
"""

from .font_manager import FontLoadError, FontMetrics, load_transcript_fonts
from .models import (
    Message,
    MessageKind,
    MediaDescriptor,
    MediaKind,
    ProcessingOptions,
    TranscriptMetadata,
    TranscriptDocument,
)
from .transcript_generator import (
    TranscriptGenerationError,
    generate_transcript_pdf,
    write_transcript_pdf,
)

__all__ = [
    'FontLoadError',
    'FontMetrics',
    'load_transcript_fonts',
    'Message',
    'MessageKind',
    'MediaDescriptor',
    'MediaKind',
    'ProcessingOptions',
    'TranscriptMetadata',
    'TranscriptDocument',
    'TranscriptGenerationError',
    'generate_transcript_pdf',
    'write_transcript_pdf',
]
