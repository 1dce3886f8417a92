"""Deterministic hashing for ledger records.

Every committed audit record carries a SHA-256 hash of the canonical JSON of
its own content. The hash is a pure function of the record: it includes the
timestamp and does not include any other record's hash (no chaining).

Strings are hashed exactly as given, without Unicode normalization: look-alike
ids hash differently and survive a JSON-lines reload byte for byte.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any

from posta.domain.models.audit_record import AuditDraft


def canonical_json(data: Any) -> str:
    """Serialize ledger content with sorted keys and compact separators.

    Raises:
        ValueError: If data holds NaN or an infinity, which JSON cannot carry.

    Example:
        >>> canonical_json({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    try:
        return json.dumps(
            data,
            sort_keys=True,
            separators=(",", ":"),
            ensure_ascii=False,
            allow_nan=False,
        )
    except ValueError as exc:
        raise ValueError(f"Ledger content holds a non-finite float: {exc}") from exc


def compute_record_hash(draft: AuditDraft) -> str:
    """Lowercase hex SHA-256 of the draft's canonical content."""
    canonical = canonical_json(draft.hashable_content())
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()
