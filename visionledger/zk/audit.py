"""Audit trail of successful proof-backed accesses."""

from __future__ import annotations

from dataclasses import dataclass

from visionledger.env import Env


@dataclass
class AuditRecord:
    user: str
    resource_id: bytes
    proof_hash: bytes
    timestamp: int


def _record_key(user: str, resource_id: bytes) -> tuple[str, bytes]:
    return (user, bytes(resource_id))


def log_access(env: Env, user: str, resource_id: bytes, proof_hash: bytes) -> AuditRecord:
    """Store an audit record for ``user`` and ``resource_id`` and publish it."""
    record = AuditRecord(
        user=user,
        resource_id=bytes(resource_id),
        proof_hash=bytes(proof_hash),
        timestamp=env.timestamp,
    )
    env.persistent.set(_record_key(user, resource_id), record)
    env.publish((user, bytes(resource_id)), record)
    return record


def get_audit_record(env: Env, user: str, resource_id: bytes) -> AuditRecord | None:
    """Return the latest audit record for the pair, or None."""
    return env.persistent.get(_record_key(user, resource_id))