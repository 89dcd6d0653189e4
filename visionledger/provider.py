"""Provider registry: profiles, verification status and lookup indexes."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from visionledger.env import Env

TTL_THRESHOLD = 5_184_000
TTL_EXTEND_TO = 10_368_000

_COUNTER_KEY = "PROV_CTR"
_IDS_KEY = "PROV_IDS"


class VerificationStatus(IntEnum):
    PENDING = 1
    VERIFIED = 2
    REJECTED = 3
    SUSPENDED = 4


@dataclass
class License:
    number: str
    issuing_authority: str
    issued_date: int
    expiry_date: int
    license_type: str


@dataclass
class Certification:
    name: str
    issuer: str
    issued_date: int
    expiry_date: int
    credential_id: str


@dataclass
class Location:
    name: str
    address: str
    city: str
    state: str
    zip: str
    country: str


@dataclass
class Provider:
    address: str
    name: str
    licenses: list[License] = field(default_factory=list)
    specialties: list[str] = field(default_factory=list)
    certifications: list[Certification] = field(default_factory=list)
    locations: list[Location] = field(default_factory=list)
    verification_status: VerificationStatus = VerificationStatus.PENDING
    registered_at: int = 0
    verified_at: int | None = None
    verified_by: str | None = None
    is_active: bool = True


def _provider_key(address: str) -> tuple[str, str]:
    return ("PROV", address)


def _specialty_key(specialty: str) -> tuple[str, str]:
    return ("SPEC_IDX", specialty)


def _status_key(status: VerificationStatus) -> tuple[str, VerificationStatus]:
    return ("STAT_IDX", VerificationStatus(status))


def _id_key(provider_id: int) -> tuple[str, int]:
    return ("PROV_ID", provider_id)


def _store(env: Env, key: tuple, value: object) -> None:
    env.persistent.set(key, value)
    env.persistent.extend_ttl(key, TTL_THRESHOLD, TTL_EXTEND_TO)


def _add_to_index(env: Env, key: tuple, address: str) -> None:
    members: list[str] = env.persistent.get(key, [])
    if address not in members:
        members.append(address)
    _store(env, key, members)


def _remove_from_index(env: Env, key: tuple, address: str) -> None:
    members: list[str] | None = env.persistent.get(key)
    if members is None:
        return
    remaining = [m for m in members if m != address]
    if remaining:
        _store(env, key, remaining)
    else:
        env.persistent.remove(key)


def get_provider(env: Env, address: str) -> Provider | None:
    """Return the stored provider profile, or None."""
    return env.persistent.get(_provider_key(address))


def set_provider(env: Env, provider: Provider) -> None:
    """Store a provider and keep the status index in step with it.

    Only active providers are listed under their verification status.
    """
    old = get_provider(env, provider.address)
    _store(env, _provider_key(provider.address), provider)

    if old is not None and (
        old.verification_status != provider.verification_status
        or old.is_active != provider.is_active
    ):
        remove_provider_from_status_index(env, old.verification_status, provider.address)

    if provider.is_active:
        add_provider_to_status_index(env, provider.verification_status, provider.address)
    else:
        remove_provider_from_status_index(env, provider.verification_status, provider.address)


def add_provider_to_specialty_index(env: Env, specialty: str, address: str) -> None:
    _add_to_index(env, _specialty_key(specialty), address)


def remove_provider_from_specialty_index(env: Env, specialty: str, address: str) -> None:
    """Drop ``address`` from the specialty index; an emptied index is deleted."""
    _remove_from_index(env, _specialty_key(specialty), address)


def get_providers_by_specialty(env: Env, specialty: str) -> list[str]:
    return env.persistent.get(_specialty_key(specialty), [])


def add_provider_to_status_index(
    env: Env, status: VerificationStatus, address: str
) -> None:
    _add_to_index(env, _status_key(status), address)


def remove_provider_from_status_index(
    env: Env, status: VerificationStatus, address: str
) -> None:
    """Drop ``address`` from the status index; an emptied index is deleted."""
    _remove_from_index(env, _status_key(status), address)


def get_providers_by_status(env: Env, status: VerificationStatus) -> list[str]:
    return env.persistent.get(_status_key(status), [])


def get_provider_counter(env: Env) -> int:
    return env.instance.get(_COUNTER_KEY, 0)


def increment_provider_counter(env: Env) -> int:
    """Advance the provider counter and return its new value."""
    count = get_provider_counter(env) + 1
    env.instance.set(_COUNTER_KEY, count)
    return count


def get_all_provider_ids(env: Env) -> list[int]:
    return env.instance.get(_IDS_KEY, [])


def add_provider_id(env: Env, provider_id: int, address: str) -> None:
    """Record ``provider_id`` and map it to the provider's address."""
    ids = get_all_provider_ids(env)
    if provider_id not in ids:
        ids.append(provider_id)
        env.instance.set(_IDS_KEY, ids)
    _store(env, _id_key(provider_id), address)


def get_provider_by_id(env: Env, provider_id: int) -> str | None:
    """Return the address registered under ``provider_id``, or None."""
    return env.persistent.get(_id_key(provider_id))