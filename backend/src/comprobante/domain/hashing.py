"""
Document fingerprints for signing and tamper detection.

A fingerprint is the SHA-256 of a document's canonical export: the same
document state always hashes to the same value, and any change to a party,
line or amount produces a different one.

Design Decisions:
- SHA-256 chosen for wide support and collision resistance
- Canonical JSON (sorted keys, compact separators) so dict ordering never
  changes the hash
- Decimals and dates serialize through ``str`` to keep full precision
"""

import hashlib
import json
from collections.abc import Mapping
from typing import Any

HASH_PREFIX = "sha256:"


def compute_document_hash(content: bytes) -> str:
    """
    Compute SHA-256 hash of raw content.

    Args:
        content: Raw bytes to fingerprint

    Returns:
        Hex-encoded SHA-256 hash prefixed with 'sha256:'

    Example:
        >>> compute_document_hash(b"invoice content")
        'sha256:a1b2c3d4...'
    """
    if not content:
        raise ValueError("Cannot hash empty content")

    digest = hashlib.sha256(content).hexdigest()
    return f"{HASH_PREFIX}{digest}"


def canonical_json(payload: Mapping[str, Any]) -> bytes:
    """Serialize a payload deterministically."""
    return json.dumps(
        payload,
        sort_keys=True,
        separators=(",", ":"),
        ensure_ascii=False,
        default=str,
    ).encode("utf-8")


def compute_payload_hash(payload: Mapping[str, Any]) -> str:
    """
    Compute the fingerprint of an exported document.

    Args:
        payload: Plain data, typically ``document.to_dict()``

    Returns:
        Hex-encoded SHA-256 hash prefixed with 'sha256:'
    """
    return compute_document_hash(canonical_json(payload))


def verify_hash(content: bytes, expected_hash: str) -> bool:
    """
    Verify that content matches an expected hash.

    Args:
        content: Raw bytes of the document
        expected_hash: The hash to verify against (with 'sha256:' prefix)

    Returns:
        True if hash matches, False otherwise
    """
    if not expected_hash.startswith(HASH_PREFIX):
        raise ValueError(f"Invalid hash format, expected 'sha256:' prefix: {expected_hash}")

    return compute_document_hash(content) == expected_hash
