"""
Object-key namespace — sanitization, key construction and ownership parsing.

Keys follow ``[folder/]ownerId/timestamp_fileName``. Ownership is carried by
the key itself, so these functions are the tenant-isolation boundary for
deletes. Everything here is pure and deterministic (apart from the default
timestamp).
"""

import re
import time
from urllib.parse import unquote

MAX_FILE_NAME_LENGTH = 255
MAX_FOLDER_LENGTH = 64
MAX_OWNER_ID_LENGTH = 128

FALLBACK_FILE_NAME = "file"
FALLBACK_OWNER_ID = "unknown"

# Anything outside these sets is stripped, never replaced
_UNSAFE_FILE_CHARS = re.compile(r"[^A-Za-z0-9._-]")
_UNSAFE_FOLDER_CHARS = re.compile(r"[^A-Za-z0-9_-]")
_LEADING_PATH = re.compile(r"^.*[/\\]", re.DOTALL)
_REPEATED_SLASHES = re.compile(r"/+")
_MALFORMED_ESCAPE = re.compile(r"%(?![0-9A-Fa-f]{2})")


def now_ms() -> int:
    """Current wall-clock time in epoch milliseconds."""
    return time.time_ns() // 1_000_000


def sanitize_file_name(file_name: str) -> str:
    """
    Reduce a client-supplied file name to a safe base name.

    "../../etc/passwd" → "passwd", "My File!@#.PNG" → "MyFile.PNG".
    Never empty, never longer than 255 characters.
    """
    if not isinstance(file_name, str):
        return FALLBACK_FILE_NAME
    base = _LEADING_PATH.sub("", file_name).replace("\0", "")
    sanitized = _UNSAFE_FILE_CHARS.sub("", base)[:MAX_FILE_NAME_LENGTH]
    return sanitized or FALLBACK_FILE_NAME


def sanitize_folder(folder: object) -> str:
    """
    Reduce an optional folder to a single safe segment.

    Returns "" for a missing folder and for anything that looks like a
    traversal or absolute path; an empty folder means "no folder".
    """
    if folder is None:
        return ""
    s = str(folder).strip()
    if not s:
        return ""
    if ".." in s or s.startswith("/") or s.startswith("\\"):
        return ""
    return _UNSAFE_FOLDER_CHARS.sub("", s)[:MAX_FOLDER_LENGTH]


def build_object_key(
    folder: str,
    owner_id: str,
    sanitized_file_name: str,
    timestamp: int | None = None,
) -> str:
    """Build ``folder/owner/<ts>_<name>`` (folder omitted when empty)."""
    if timestamp is None:
        timestamp = now_ms()
    safe_owner = _UNSAFE_FILE_CHARS.sub("", str(owner_id))[:MAX_OWNER_ID_LENGTH] or FALLBACK_OWNER_ID
    parts = [p for p in (folder, safe_owner, f"{timestamp}_{sanitized_file_name}") if p]
    return _REPEATED_SLASHES.sub("/", "/".join(parts))


def decode_object_key(raw: str) -> str | None:
    """Percent-decode a key; None for malformed escapes or invalid UTF-8."""
    if _MALFORMED_ESCAPE.search(raw):
        return None
    try:
        return unquote(raw, errors="strict")
    except UnicodeDecodeError:
        return None


def object_key_belongs_to_user(object_key: str, owner_id: str) -> bool:
    """
    Decide from the key alone whether ``owner_id`` owns it.

    Two segments: ``owner/file`` — the owner is segment 0.
    Three or more: ``folder/owner/file`` — the owner is always segment 1,
    however many segments follow.
    """
    if not object_key or not isinstance(object_key, str):
        return False
    if ".." in object_key or "\0" in object_key:
        return False
    decoded = decode_object_key(object_key)
    if decoded is None:
        return False
    if ".." in decoded or "\0" in decoded:
        return False
    segments = [s for s in _REPEATED_SLASHES.sub("/", decoded).split("/") if s]
    if len(segments) == 2:
        return segments[0] == owner_id
    if len(segments) >= 3:
        return segments[1] == owner_id
    return False
