"""
SHA-256 helpers for media authentication.

Hashes are resolved before layout starts so the drawing pass never waits on
file I/O.
"""

import os
import hashlib
import logging

from .models import MediaKind
from . import settings

_LOGGER = logging.getLogger(__name__)

# Sub-folders of an evidence package, per media kind
EVIDENCE_SUBDIRS = {
    MediaKind.VOICE: "audio",
    MediaKind.IMAGE: "images",
    MediaKind.DOCUMENT: "pdfs",
    MediaKind.ATTACHMENT: "other",
}

_CHUNK_SIZE = 1024 * 1024


def calculate_file_hash(file_path):
    """
    Calculate the SHA-256 hash of a file.

    :param file_path: Path to the file
    :return: Hex digest, or None if the file cannot be read
    """
    if not os.path.exists(file_path):
        return None

    digest = hashlib.sha256()
    try:
        with open(file_path, "rb") as f:
            for chunk in iter(lambda: f.read(_CHUNK_SIZE), b""):
                digest.update(chunk)
    except OSError as e:
        _LOGGER.error(f"Error calculating hash for {file_path}: {e}")
        return None
    return digest.hexdigest()


def find_media_file_path(descriptor, media_dirs, chat_id=None):
    """
    Try to find the local copy of a media file.

    Candidates, in order: <dir>/<chat_id>/<name>, <dir>/<name> and
    <dir>/../evidence/<kind folder>/<name> for every media dir.

    :param descriptor: MediaDescriptor
    :param media_dirs: Directories to search
    :param chat_id: Optional chat export id used as sub-directory
    :return: Path to the file, or None if not found
    """
    file_name = descriptor.original_name or (
        os.path.basename(descriptor.key) if descriptor.key else None
    ) or descriptor.id
    if not file_name:
        return None

    possible_paths = []
    for media_dir in media_dirs:
        if chat_id is not None:
            possible_paths.append(os.path.join(media_dir, str(chat_id), file_name))
        possible_paths.append(os.path.join(media_dir, file_name))
        evidence_dir = os.path.join(os.path.dirname(os.path.normpath(media_dir)), "evidence")
        possible_paths.append(
            os.path.join(evidence_dir, EVIDENCE_SUBDIRS[descriptor.kind], file_name)
        )

    for possible_path in possible_paths:
        if os.path.isfile(possible_path):
            return possible_path
    return None


def resolve_descriptor_hashes(descriptors, media_dirs=None, chat_id=None):
    """
    Collect a hash for every descriptor that has one available.

    Stored hashes are used as-is; missing ones are computed from the local
    file if it can be found. Descriptors are not modified.

    :param descriptors: Iterable of MediaDescriptor
    :param media_dirs: Directories to search (default: settings.get_media_dirs())
    :param chat_id: Optional chat export id
    :return: Dict mapping descriptor id to hex digest
    """
    if media_dirs is None:
        media_dirs = settings.get_media_dirs()

    hashes = {}
    for descriptor in descriptors:
        if descriptor.id in hashes:
            continue
        if descriptor.file_hash:
            hashes[descriptor.id] = descriptor.file_hash
            continue

        file_path = find_media_file_path(descriptor, media_dirs, chat_id)
        if not file_path:
            _LOGGER.debug(f"No local file found to hash media {descriptor.id}")
            continue

        file_hash = calculate_file_hash(file_path)
        if file_hash:
            hashes[descriptor.id] = file_hash
            _LOGGER.info(
                f"Calculated SHA-256 hash for {os.path.basename(file_path)}: {file_hash[:8]}..."
            )
    return hashes
