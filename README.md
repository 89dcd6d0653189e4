# visionledger

`visionledger` is a small, self-contained state engine for vision-care
systems. All state lives in an in-memory, ledger-like key/value store, and
the package provides:

- **Role-based access control** (`visionledger.rbac`): patient, staff,
  optometrist, ophthalmologist and admin roles with base permissions, custom
  grants and revokes, expiring role assignments, role delegation and ACL
  groups.
- **Input validation** (`visionledger.validation`): names, data hashes and
  access durations checked against fixed limits.
- **Provider registry** (`visionledger.provider`): provider profiles with
  licences, certifications and locations, indexes by specialty and by
  verification status, and a numeric id registry.
- **Rate limiting** (`visionledger.rate_limit`): fixed-window limits per
  address and operation, with a bypass for trusted addresses.
- **Proof-backed access verification** (`visionledger.zk`): access requests
  are checked for shape, whitelist membership and rate limit before the proof
  is verified; every successful access is written to an audit trail.

Requires Python 3.10 or later. The only runtime dependency is `pycryptodome`
(used for Keccak-256).

## The environment

Every operation works on an `Env` from `visionledger.env`. An `Env` has:

- `timestamp`: the current ledger time in seconds (set it yourself to move
  time forward or back);
- `persistent` and `instance`: two `Storage` objects;
- `events`: a list of `(topics, data)` tuples appended by `Env.publish`.

`Storage` offers `get(key, default)`, `set(key, value)`, `remove(key)`,
`has(key)`, `extend_ttl(key, threshold, extend_to)` and `ttl(key)`. Values are
deep-copied on the way in and out, so changing a returned object does not
change what is stored. Addresses throughout the package are plain strings.

```python
from visionledger.env import Env

env = Env()
env.timestamp = 1_000
```

## Roles and permissions

```python
from visionledger import rbac
from visionledger.rbac import Permission, Role

rbac.assign_role(env, "GSTAFF", Role.STAFF, 0)                # 0 = never expires
rbac.has_permission(env, "GSTAFF", Permission.MANAGE_USERS)   # True
rbac.has_permission(env, "GSTAFF", Permission.WRITE_RECORD)   # False

rbac.grant_custom_permission(env, "GSTAFF", Permission.WRITE_RECORD)
rbac.has_permission(env, "GSTAFF", Permission.WRITE_RECORD)   # True
```

- `base_permissions(role)` lists what a role carries by itself.
- An assignment with a non-zero `expires_at` is active only while
  `expires_at > env.timestamp`; the same holds for delegations.
- `grant_custom_permission` and `revoke_custom_permission` raise
  `AssignmentNotFoundError` when the user has no active assignment.
- `has_permission` checks, in order: an explicit revoke (which always denies),
  a custom grant, the role's base permissions, then the permissions of every
  ACL group the user belongs to.
- Delegations (`delegate_role`, `get_active_delegation`, `get_delegators`)
  are checked only by `has_delegated_permission(env, delegator, delegatee,
  permission)`, which looks at the base permissions of the delegated role.
- ACL groups: `create_group`, `delete_group`, `add_to_group` (raises
  `GroupNotFoundError` for an unknown group), `remove_from_group`,
  `get_user_groups` and `get_group_permissions`.

## Validation

```python
from visionledger.validation import (
    InvalidInputError, validate_data_hash, validate_duration, validate_name,
)

validate_name("John Doe")        # 2-64 bytes of printable ASCII
validate_data_hash("QmYwAPJzv5CZsnA625s3Xf2nemtYgPpHdWEz79ojWnPbdG")  # 32-64 bytes of [A-Za-z0-9_-]
validate_duration(3600)          # one hour up to five years (157,680,000 s)

try:
    validate_duration(3599)
except InvalidInputError:        # a ValueError
    ...
```

## Provider registry

```python
from visionledger.provider import (
    Provider, VerificationStatus, get_providers_by_status, set_provider,
)

set_provider(env, Provider(address="GPROV", name="Dr. Smith"))
get_providers_by_status(env, VerificationStatus.PENDING)   # ["GPROV"]
```

`set_provider` keeps the status index in step: only active providers are
listed under their verification status. Specialty indexes are maintained
explicitly with `add_provider_to_specialty_index` and
`remove_provider_from_specialty_index`; an index that becomes empty is
deleted. `increment_provider_counter`, `add_provider_id`,
`get_all_provider_ids` and `get_provider_by_id` manage numeric provider ids.

## Rate limiting

```python
from visionledger import rate_limit
from visionledger.rate_limit import RateLimitConfig

rate_limit.set_rate_limit_config(
    env, RateLimitConfig(max_requests=2, window_seconds=60, operation="add_record")
)
decision = rate_limit.check_rate_limit(env, "GUSER", "add_record")
decision.allowed, decision.current_count, decision.reset_at
```

`check_rate_limit` counts the request and returns a `RateLimitDecision`.
Addresses with a bypass (`set_rate_limit_bypass`) and operations without a
configuration are always allowed and reported with zero counts. Once a
window has elapsed, the next request opens a new window.
`get_rate_limit_status` describes the current window, and
`get_rate_limit_bypass_addresses` lists bypassed addresses in grant order.
`get_all_rate_limit_configs` reports only the operations named in
`KNOWN_OPERATIONS` (`add_record`, `get_record`, `grant_access`,
`register_user`).

## Proof-backed access verification

```python
from visionledger.zk.contract import ZkVerifierContract
from visionledger.zk.helpers import create_request

contract = ZkVerifierContract()          # or ZkVerifierContract(env)
contract.initialize("GADMIN")

proof_a = bytes([1]) + bytes(63)
proof_b = bytes([1]) + bytes(127)
proof_c = bytes([1]) + bytes(63)
public_input = bytes([1]) + bytes(31)

request = create_request(
    "GUSER", bytes([2]) * 32, proof_a, proof_b, proof_c, [public_input]
)
contract.verify_access(request)                          # True
contract.get_audit_record("GUSER", bytes([2]) * 32)      # AuditRecord(...)
```

- `Proof` requires `a` and `c` of 64 bytes and `b` of 128 bytes;
  `AccessRequest` requires a 32-byte `resource_id` and 32-byte public inputs.
  Wrong lengths raise `ValueError`.
- `initialize` sets the admin once; later calls change nothing. The
  whitelist and rate limit settings may only be changed by the admin.
- `verify_access` raises `ZkVerifierError`, whose `code` is a `ZkErrorCode`:
  `EMPTY_PUBLIC_INPUTS`, `TOO_MANY_PUBLIC_INPUTS` (more than 16),
  `DEGENERATE_PROOF` (an all-zero point), `UNAUTHORIZED` (not whitelisted
  while the whitelist is enabled, or a non-admin caller of an admin method),
  `RATE_LIMITED` and `INVALID_CONFIG` (a zero limit or window).
- A valid proof stores an `AuditRecord` holding the Keccak-256 hash of the
  public inputs (`poseidon_hash`) and publishes it as an event.

## What this package does not do

- **No real proof verification.** `verify_proof` is a placeholder: it accepts
  a proof when the first byte of `a`, of `c` and of the first public input is
  1. `poseidon_hash` is Keccak-256, not Poseidon.
- **No durable storage.** Everything lives in the `Env` in memory; TTLs are
  recorded but nothing ever expires from storage.
- **No authentication.** Callers are identified only by the address string
  they pass; no signatures are checked.
- **No medical records, consent or access grants.** The package covers
  roles, providers, rate limits and proof-backed access only; it does not
  store records or patient consent.
- **No command-line interface or server.** It is a library only.

## Running the tests

From a checkout of the package:

```
pip install -e ".[test]"
pytest
```