import pytest

from visionledger import provider as pv
from visionledger.env import Env
from visionledger.provider import (
    Certification,
    License,
    Location,
    Provider,
    VerificationStatus,
)


@pytest.fixture
def env():
    return Env(timestamp=1000)


def _make(address, status=VerificationStatus.PENDING, active=True):
    return Provider(
        address=address,
        name="Dr. Smith",
        licenses=[License("LIC-A", "Board", 10, 20, "OD")],
        specialties=["retina"],
        certifications=[Certification("Cert", "Issuer", 10, 20, "CRED-A")],
        locations=[Location("Clinic", "1 Main St", "Town", "ST", "00000", "Nowhere")],
        verification_status=status,
        is_active=active,
    )


def test_get_missing_provider_is_none(env):
    assert pv.get_provider(env, "nobody") is None


def test_set_and_get_round_trip(env):
    prov = _make("doc1")
    pv.set_provider(env, prov)
    stored = pv.get_provider(env, "doc1")
    assert stored == prov
    assert stored is not prov


def test_set_provider_extends_ttl(env):
    pv.set_provider(env, _make("doc1"))
    assert env.persistent.ttl(("PROV", "doc1")) == pv.TTL_EXTEND_TO


def test_active_provider_listed_under_status(env):
    pv.set_provider(env, _make("doc1"))
    assert pv.get_providers_by_status(env, VerificationStatus.PENDING) == ["doc1"]


def test_status_change_moves_index(env):
    pv.set_provider(env, _make("doc1"))
    pv.set_provider(env, _make("doc1", status=VerificationStatus.VERIFIED))
    assert pv.get_providers_by_status(env, VerificationStatus.PENDING) == []
    assert pv.get_providers_by_status(env, VerificationStatus.VERIFIED) == ["doc1"]


def test_deactivation_removes_from_index(env):
    pv.set_provider(env, _make("doc1", status=VerificationStatus.VERIFIED))
    pv.set_provider(env, _make("doc2", status=VerificationStatus.VERIFIED))
    pv.set_provider(env, _make("doc1", status=VerificationStatus.VERIFIED, active=False))
    assert pv.get_providers_by_status(env, VerificationStatus.VERIFIED) == ["doc2"]


def test_inactive_new_provider_not_indexed(env):
    pv.set_provider(env, _make("doc1", active=False))
    assert pv.get_providers_by_status(env, VerificationStatus.PENDING) == []
    assert pv.get_provider(env, "doc1").is_active is False


def test_repeated_set_does_not_duplicate(env):
    pv.set_provider(env, _make("doc1"))
    pv.set_provider(env, _make("doc1"))
    assert pv.get_providers_by_status(env, VerificationStatus.PENDING) == ["doc1"]


def test_specialty_index_add_is_idempotent(env):
    pv.add_provider_to_specialty_index(env, "retina", "doc1")
    pv.add_provider_to_specialty_index(env, "retina", "doc1")
    pv.add_provider_to_specialty_index(env, "retina", "doc2")
    assert pv.get_providers_by_specialty(env, "retina") == ["doc1", "doc2"]


def test_specialty_index_remove_deletes_empty_key(env):
    pv.add_provider_to_specialty_index(env, "retina", "doc1")
    pv.remove_provider_from_specialty_index(env, "retina", "doc1")
    assert not env.persistent.has(("SPEC_IDX", "retina"))
    assert pv.get_providers_by_specialty(env, "retina") == []


def test_specialty_index_remove_keeps_others(env):
    pv.add_provider_to_specialty_index(env, "glaucoma", "doc1")
    pv.add_provider_to_specialty_index(env, "glaucoma", "doc2")
    pv.remove_provider_from_specialty_index(env, "glaucoma", "doc1")
    assert pv.get_providers_by_specialty(env, "glaucoma") == ["doc2"]


def test_remove_from_missing_index_is_noop(env):
    pv.remove_provider_from_status_index(env, VerificationStatus.REJECTED, "doc1")
    assert pv.get_providers_by_status(env, VerificationStatus.REJECTED) == []


def test_counter_starts_at_zero_and_increments(env):
    start = pv.get_provider_counter(env)
    assert start == 0
    first = pv.increment_provider_counter(env)
    second = pv.increment_provider_counter(env)
    assert first == start + 1
    assert second == first + 1
    assert pv.get_provider_counter(env) == second


def test_provider_ids_round_trip(env):
    pv.add_provider_id(env, 7, "doc1")
    pv.add_provider_id(env, 7, "doc1")
    pv.add_provider_id(env, 9, "doc2")
    assert pv.get_all_provider_ids(env) == [7, 9]
    assert pv.get_provider_by_id(env, 9) == "doc2"
    assert pv.get_provider_by_id(env, 42) is None