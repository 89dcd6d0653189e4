import pytest

from visionledger import rate_limit as rl
from visionledger.env import Env
from visionledger.rate_limit import RateLimitConfig, RateLimitDecision


@pytest.fixture
def env():
    return Env(timestamp=1000)


@pytest.fixture
def configured(env):
    rl.set_rate_limit_config(env, RateLimitConfig(2, 60, "add_record"))
    return env


def test_config_round_trip(env):
    config = RateLimitConfig(5, 30, "get_record")
    rl.set_rate_limit_config(env, config)
    assert rl.get_rate_limit_config(env, "get_record") == config
    assert rl.get_rate_limit_config(env, "unknown") is None


def test_unconfigured_operation_always_allowed(env):
    decision = rl.check_rate_limit(env, "alice", "add_record")
    assert decision == RateLimitDecision(True, 0, 0, 0)


def test_bypass_always_allowed(configured):
    rl.set_rate_limit_bypass(configured, "alice", True)
    for _ in range(5):
        assert rl.check_rate_limit(configured, "alice", "add_record") == RateLimitDecision(
            True, 0, 0, 0
        )
    assert rl.get_rate_limit_count(configured, "alice", "add_record") == 0


def test_bypass_can_be_cleared(env):
    rl.set_rate_limit_bypass(env, "alice", True)
    assert rl.has_rate_limit_bypass(env, "alice") is True
    rl.set_rate_limit_bypass(env, "alice", False)
    assert rl.has_rate_limit_bypass(env, "alice") is False


def test_limit_enforced_within_window(configured):
    first = rl.check_rate_limit(configured, "alice", "add_record")
    second = rl.check_rate_limit(configured, "alice", "add_record")
    third = rl.check_rate_limit(configured, "alice", "add_record")
    assert first.allowed and second.allowed
    assert second.current_count == first.current_count + 1
    assert not third.allowed
    assert third.current_count == second.current_count
    assert third.max_requests == 2


def test_limit_is_per_address(configured):
    rl.check_rate_limit(configured, "alice", "add_record")
    rl.check_rate_limit(configured, "alice", "add_record")
    assert not rl.check_rate_limit(configured, "alice", "add_record").allowed
    assert rl.check_rate_limit(configured, "bob", "add_record").allowed


def test_window_resets_after_expiry(configured):
    rl.check_rate_limit(configured, "alice", "add_record")
    rl.check_rate_limit(configured, "alice", "add_record")
    blocked = rl.check_rate_limit(configured, "alice", "add_record")
    assert not blocked.allowed

    configured.timestamp = blocked.reset_at + 1
    after = rl.check_rate_limit(configured, "alice", "add_record")
    assert after.allowed
    assert after.current_count == 1
    assert after.reset_at == configured.timestamp + 60
    assert rl.get_rate_limit_window(configured, "alice", "add_record") == configured.timestamp


def test_window_defaults_to_now(env):
    assert rl.get_rate_limit_window(env, "alice", "add_record") == env.timestamp


def test_count_increment_and_reset(env):
    assert rl.increment_rate_limit_count(env, "alice", "op") == 1
    assert rl.increment_rate_limit_count(env, "alice", "op") == 2
    rl.reset_rate_limit_count(env, "alice", "op")
    assert rl.get_rate_limit_count(env, "alice", "op") == 0


def test_count_key_ttl_extended(env):
    rl.increment_rate_limit_count(env, "alice", "op")
    assert env.persistent.ttl(("RL_CNT", "alice", "op")) == rl.TTL_EXTEND_TO


def test_status_reports_window(configured):
    rl.set_rate_limit_window(configured, "alice", "add_record", 900)
    rl.increment_rate_limit_count(configured, "alice", "add_record")
    status = rl.get_rate_limit_status(configured, "alice", "add_record")
    assert status.window_start == 900
    assert status.window_end == 900 + 60
    assert status.reset_at == status.window_end
    assert status.current_count == 1
    assert status.max_requests == 2


def test_status_none_without_config(env):
    assert rl.get_rate_limit_status(env, "alice", "add_record") is None


def test_all_configs_only_known_operations(env):
    rl.set_rate_limit_config(env, RateLimitConfig(1, 10, "register_user"))
    rl.set_rate_limit_config(env, RateLimitConfig(3, 20, "add_record"))
    rl.set_rate_limit_config(env, RateLimitConfig(4, 40, "custom_op"))
    ops = [c.operation for c in rl.get_all_rate_limit_configs(env)]
    assert ops == ["add_record", "register_user"]


def test_bypass_addresses_not_listed(env):
    rl.set_rate_limit_bypass(env, "alice", True)
    assert rl.get_rate_limit_bypass_addresses(env) == []


def test_stats_defaults():
    stats = rl.RateLimitStats()
    assert stats.total_requests == 0
    assert stats.top_rate_limited_operations == []