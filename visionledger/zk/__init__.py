"""Proof-backed access verification: proof containers, audit trail, request helpers and the verifier contract."""

__all__ = ["verifier", "audit", "helpers", "contract"]