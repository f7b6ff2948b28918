"""Deterministic room and pair keys for two-user chats."""

from __future__ import annotations

import hashlib

PAIR_SEPARATOR = "$"


def canonical_pair(user_id: str, other_user_id: str) -> list[str]:
    """The two ids in lexicographic order."""
    return sorted([str(user_id), str(other_user_id)])


def pair_key(user_id: str, other_user_id: str) -> str:
    """Order-independent plain key for a pair, used to address its conversation."""
    return PAIR_SEPARATOR.join(canonical_pair(user_id, other_user_id))


def room_id_for(user_id: str, other_user_id: str) -> str:
    """Broadcast room for a pair of users.

    SHA-256 of the sorted ids joined with ``$``, so ``(a, b)`` and ``(b, a)``
    land in the same room. The hash is a routing key, not an access check.
    """
    return hashlib.sha256(pair_key(user_id, other_user_id).encode()).hexdigest()
