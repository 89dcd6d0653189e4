"""Per-address, per-operation request rate limiting with fixed windows."""

from __future__ import annotations

from dataclasses import dataclass, field

from visionledger.env import Env

TTL_THRESHOLD = 5_184_000
TTL_EXTEND_TO = 10_368_000

KNOWN_OPERATIONS = ("add_record", "get_record", "grant_access", "register_user")

_BYPASS_INDEX_KEY = ("RL_BYP_IDX",)


@dataclass
class RateLimitConfig:
    max_requests: int
    window_seconds: int
    operation: str


@dataclass
class RateLimitStatus:
    address: str
    operation: str
    current_count: int
    max_requests: int
    window_seconds: int
    window_start: int
    window_end: int
    reset_at: int


@dataclass
class RateLimitStats:
    total_requests: int = 0
    rate_limited_requests: int = 0
    unique_addresses: int = 0
    top_rate_limited_operations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class RateLimitDecision:
    """Outcome of a rate limit check."""

    allowed: bool
    current_count: int
    max_requests: int
    reset_at: int


_UNLIMITED = RateLimitDecision(allowed=True, current_count=0, max_requests=0, reset_at=0)


def _config_key(operation: str) -> tuple[str, str]:
    return ("RL_CFG", operation)


def _window_key(address: str, operation: str) -> tuple[str, str, str]:
    return ("RL_WIN", address, operation)


def _count_key(address: str, operation: str) -> tuple[str, str, str]:
    return ("RL_CNT", address, operation)


def _bypass_key(address: str) -> tuple[str, str]:
    return ("RL_BYP", address)


def _store(env: Env, key: tuple, value: object) -> None:
    env.persistent.set(key, value)
    env.persistent.extend_ttl(key, TTL_THRESHOLD, TTL_EXTEND_TO)


def get_rate_limit_config(env: Env, operation: str) -> RateLimitConfig | None:
    return env.persistent.get(_config_key(operation))


def set_rate_limit_config(env: Env, config: RateLimitConfig) -> None:
    _store(env, _config_key(config.operation), config)


def get_rate_limit_window(env: Env, address: str, operation: str) -> int:
    """Return the window start, defaulting to the current time."""
    return env.persistent.get(_window_key(address, operation), env.timestamp)


def set_rate_limit_window(env: Env, address: str, operation: str, window_start: int) -> None:
    _store(env, _window_key(address, operation), window_start)


def get_rate_limit_count(env: Env, address: str, operation: str) -> int:
    return env.persistent.get(_count_key(address, operation), 0)


def increment_rate_limit_count(env: Env, address: str, operation: str) -> int:
    """Add one to the request count and return the new count."""
    count = get_rate_limit_count(env, address, operation) + 1
    _store(env, _count_key(address, operation), count)
    return count


def reset_rate_limit_count(env: Env, address: str, operation: str) -> None:
    _store(env, _count_key(address, operation), 0)


def has_rate_limit_bypass(env: Env, address: str) -> bool:
    return env.persistent.get(_bypass_key(address), False)


def set_rate_limit_bypass(env: Env, address: str, bypass: bool) -> None:
    """Grant or withdraw the bypass for ``address`` and keep the index in step."""
    key = _bypass_key(address)
    index = list(env.persistent.get(_BYPASS_INDEX_KEY, []))
    if bypass:
        _store(env, key, True)
        if address not in index:
            index.append(address)
    else:
        env.persistent.remove(key)
        index = [entry for entry in index if entry != address]

    if index:
        _store(env, _BYPASS_INDEX_KEY, index)
    else:
        env.persistent.remove(_BYPASS_INDEX_KEY)


def check_rate_limit(env: Env, address: str, operation: str) -> RateLimitDecision:
    """Count a request against the limit and say whether it is allowed.

    Addresses with a bypass, and operations without a configuration, are
    always allowed and reported with zero counts.
    """
    if has_rate_limit_bypass(env, address):
        return _UNLIMITED

    config = get_rate_limit_config(env, operation)
    if config is None:
        return _UNLIMITED

    now = env.timestamp
    window_start = get_rate_limit_window(env, address, operation)
    window_end = window_start + config.window_seconds

    if now >= window_end:
        set_rate_limit_window(env, address, operation, now)
        reset_rate_limit_count(env, address, operation)
        count = increment_rate_limit_count(env, address, operation)
        return RateLimitDecision(True, count, config.max_requests, now + config.window_seconds)

    current = get_rate_limit_count(env, address, operation)
    if current == 0:
        set_rate_limit_window(env, address, operation, window_start)

    if current >= config.max_requests:
        return RateLimitDecision(False, current, config.max_requests, window_end)

    count = increment_rate_limit_count(env, address, operation)
    return RateLimitDecision(True, count, config.max_requests, window_end)


def get_rate_limit_status(env: Env, address: str, operation: str) -> RateLimitStatus | None:
    """Describe the current window for ``address``, or None if unconfigured."""
    config = get_rate_limit_config(env, operation)
    if config is None:
        return None
    window_start = get_rate_limit_window(env, address, operation)
    window_end = window_start + config.window_seconds
    return RateLimitStatus(
        address=address,
        operation=operation,
        current_count=get_rate_limit_count(env, address, operation),
        max_requests=config.max_requests,
        window_seconds=config.window_seconds,
        window_start=window_start,
        window_end=window_end,
        reset_at=window_end,
    )


def get_all_rate_limit_configs(env: Env) -> list[RateLimitConfig]:
    """Return the configurations of the known operations that have one."""
    return [
        config
        for config in (get_rate_limit_config(env, op) for op in KNOWN_OPERATIONS)
        if config is not None
    ]


def get_rate_limit_bypass_addresses(env: Env) -> list[str]:
    """Return the addresses that currently hold a rate limit bypass, in grant order."""
    return [
        address
        for address in env.persistent.get(_BYPASS_INDEX_KEY, [])
        if has_rate_limit_bypass(env, address)
    ]