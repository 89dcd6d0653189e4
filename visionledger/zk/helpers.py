"""Convenience constructors for access requests."""

from __future__ import annotations

from typing import Iterable

from visionledger.zk.verifier import AccessRequest, Proof


def create_request(
    user: str,
    resource_id: bytes,
    proof_a: bytes,
    proof_b: bytes,
    proof_c: bytes,
    public_inputs: Iterable[bytes],
) -> AccessRequest:
    """Build an ``AccessRequest`` from raw byte strings."""
    return AccessRequest(
        user=user,
        resource_id=bytes(resource_id),
        proof=Proof(a=bytes(proof_a), b=bytes(proof_b), c=bytes(proof_c)),
        public_inputs=[bytes(pi) for pi in public_inputs],
    )