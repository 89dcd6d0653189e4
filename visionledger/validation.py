"""Input validation for names, data hashes and access durations."""

from __future__ import annotations

MIN_NAME_LEN = 2
MAX_NAME_LEN = 64

MIN_HASH_LEN = 32
MAX_HASH_LEN = 64

MIN_DURATION_SECONDS = 3600
MAX_DURATION_SECONDS = 157_680_000

_HASH_BYTES = frozenset(
    b"abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ0123456789-_"
)


class InvalidInputError(ValueError):
    """Raised when an input fails validation."""


def validate_name(name: str) -> None:
    """Accept names of 2 to 64 bytes made of printable ASCII only."""
    raw = name.encode("utf-8")
    if not MIN_NAME_LEN <= len(raw) <= MAX_NAME_LEN:
        raise InvalidInputError(f"name length {len(raw)} out of range")
    if any(not 32 <= b <= 126 for b in raw):
        raise InvalidInputError("name contains non-printable characters")


def validate_data_hash(data_hash: str) -> None:
    """Accept hashes of 32 to 64 bytes made of ASCII letters, digits, '-' and '_'."""
    raw = data_hash.encode("utf-8")
    if not MIN_HASH_LEN <= len(raw) <= MAX_HASH_LEN:
        raise InvalidInputError(f"hash length {len(raw)} out of range")
    if any(b not in _HASH_BYTES for b in raw):
        raise InvalidInputError("hash contains invalid characters")


def validate_duration(duration_seconds: int) -> None:
    """Accept durations from one hour to five years."""
    if not MIN_DURATION_SECONDS <= duration_seconds <= MAX_DURATION_SECONDS:
        raise InvalidInputError(f"duration {duration_seconds} out of range")