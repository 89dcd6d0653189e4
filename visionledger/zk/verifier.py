"""Groth16-style proof containers, a placeholder verifier and the input hash."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from Crypto.Hash import keccak

G1_POINT_LEN = 64
G2_POINT_LEN = 128
FIELD_ELEMENT_LEN = 32


def _fixed(value: bytes, length: int, name: str) -> bytes:
    raw = bytes(value)
    if len(raw) != length:
        raise ValueError(f"{name} must be {length} bytes, got {len(raw)}")
    return raw


@dataclass
class Proof:
    """Compressed proof points: ``a`` and ``c`` on G1, ``b`` on G2."""

    a: bytes
    b: bytes
    c: bytes

    def __post_init__(self) -> None:
        self.a = _fixed(self.a, G1_POINT_LEN, "a")
        self.b = _fixed(self.b, G2_POINT_LEN, "b")
        self.c = _fixed(self.c, G1_POINT_LEN, "c")


@dataclass
class AccessRequest:
    """A user's request to access a resource, backed by a proof."""

    user: str
    resource_id: bytes
    proof: Proof
    public_inputs: list[bytes] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.resource_id = _fixed(self.resource_id, FIELD_ELEMENT_LEN, "resource_id")
        self.public_inputs = [
            _fixed(pi, FIELD_ELEMENT_LEN, "public input") for pi in self.public_inputs
        ]


def verify_proof(proof: Proof, public_inputs: Sequence[bytes]) -> bool:
    """Check a proof against its public inputs.

    A proof is accepted when the first byte of ``a``, of ``c`` and of the
    first public input is 1. Without public inputs nothing is accepted.
    """
    if not public_inputs:
        return False
    return proof.a[0] == 1 and proof.c[0] == 1 and public_inputs[0][:1] == b"\x01"


def poseidon_hash(inputs: Iterable[bytes]) -> bytes:
    """Hash the concatenated inputs to 32 bytes (Keccak-256)."""
    digest = keccak.new(digest_bits=256)
    digest.update(b"".join(bytes(i) for i in inputs))
    return digest.digest()