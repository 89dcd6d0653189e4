"""Access verification contract: admin, whitelist, rate limits and proof checks."""

from __future__ import annotations

from enum import IntEnum

from visionledger.env import Env
from visionledger.zk.audit import AuditRecord, get_audit_record, log_access
from visionledger.zk.verifier import AccessRequest, poseidon_hash, verify_proof

MAX_PUBLIC_INPUTS = 16
_U64_MAX = 2**64 - 1

_ADMIN_KEY = "ADMIN"
_RATE_CFG_KEY = "RATECFG"
_RATE_TRACK = "RLTRK"
_WHITELIST_ENABLED_KEY = "WL_ON"
_WHITELIST = "WL"


class ZkErrorCode(IntEnum):
    UNAUTHORIZED = 1
    RATE_LIMITED = 2
    INVALID_CONFIG = 3
    EMPTY_PUBLIC_INPUTS = 4
    TOO_MANY_PUBLIC_INPUTS = 5
    DEGENERATE_PROOF = 6


class ZkVerifierError(Exception):
    """Raised by the verifier contract; ``code`` says why."""

    def __init__(self, code: ZkErrorCode) -> None:
        super().__init__(code.name)
        self.code = code


def _saturating_add(a: int, b: int) -> int:
    return min(a + b, _U64_MAX)


def validate_request(request: AccessRequest) -> None:
    """Reject requests without inputs, with too many, or with an all-zero proof point."""
    if not request.public_inputs:
        raise ZkVerifierError(ZkErrorCode.EMPTY_PUBLIC_INPUTS)
    if len(request.public_inputs) > MAX_PUBLIC_INPUTS:
        raise ZkVerifierError(ZkErrorCode.TOO_MANY_PUBLIC_INPUTS)
    proof = request.proof
    if any(not any(point) for point in (proof.a, proof.b, proof.c)):
        raise ZkVerifierError(ZkErrorCode.DEGENERATE_PROOF)


class ZkVerifierContract:
    """Verifies access proofs and keeps an audit trail of granted accesses."""

    def __init__(self, env: Env | None = None) -> None:
        self.env = env if env is not None else Env()

    def initialize(self, admin: str) -> None:
        """Set the admin once; later calls change nothing."""
        if self.env.instance.has(_ADMIN_KEY):
            return
        self.env.instance.set(_ADMIN_KEY, admin)

    def _require_admin(self, caller: str) -> None:
        admin = self.env.instance.get(_ADMIN_KEY)
        if admin is None or caller != admin:
            raise ZkVerifierError(ZkErrorCode.UNAUTHORIZED)

    def set_rate_limit_config(
        self, caller: str, max_requests_per_window: int, window_duration_seconds: int
    ) -> None:
        """Limit each address to a number of verifications per window."""
        self._require_admin(caller)
        if max_requests_per_window == 0 or window_duration_seconds == 0:
            raise ZkVerifierError(ZkErrorCode.INVALID_CONFIG)
        self.env.instance.set(
            _RATE_CFG_KEY, (max_requests_per_window, window_duration_seconds)
        )

    def get_rate_limit_config(self) -> tuple[int, int] | None:
        return self.env.instance.get(_RATE_CFG_KEY)

    def set_whitelist_enabled(self, caller: str, enabled: bool) -> None:
        self._require_admin(caller)
        self.env.instance.set(_WHITELIST_ENABLED_KEY, bool(enabled))

    def add_to_whitelist(self, caller: str, user: str) -> None:
        self._require_admin(caller)
        self.env.persistent.set((_WHITELIST, user), True)

    def remove_from_whitelist(self, caller: str, user: str) -> None:
        self._require_admin(caller)
        self.env.persistent.remove((_WHITELIST, user))

    def is_whitelist_enabled(self) -> bool:
        return self.env.instance.get(_WHITELIST_ENABLED_KEY, False)

    def is_whitelisted(self, user: str) -> bool:
        return self.env.persistent.get((_WHITELIST, user), False)

    def _has_whitelist_access(self, user: str) -> bool:
        return not self.is_whitelist_enabled() or self.is_whitelisted(user)

    def _check_and_update_rate_limit(self, user: str) -> None:
        config = self.get_rate_limit_config()
        if config is None:
            return
        max_requests, window = config
        if max_requests == 0 or window == 0:
            return

        now = self.env.timestamp
        key = (_RATE_TRACK, user)
        count, window_start = self.env.persistent.get(key, (0, now))

        if now >= _saturating_add(window_start, window):
            count, window_start = 0, now

        following = _saturating_add(count, 1)
        if following > max_requests:
            raise ZkVerifierError(ZkErrorCode.RATE_LIMITED)
        self.env.persistent.set(key, (following, window_start))

    def verify_access(self, request: AccessRequest) -> bool:
        """Verify the request's proof; a valid proof is written to the audit trail."""
        validate_request(request)
        if not self._has_whitelist_access(request.user):
            raise ZkVerifierError(ZkErrorCode.UNAUTHORIZED)
        self._check_and_update_rate_limit(request.user)

        is_valid = verify_proof(request.proof, request.public_inputs)
        if is_valid:
            proof_hash = poseidon_hash(request.public_inputs)
            log_access(self.env, request.user, request.resource_id, proof_hash)
        return is_valid

    def get_audit_record(self, user: str, resource_id: bytes) -> AuditRecord | None:
        return get_audit_record(self.env, user, resource_id)