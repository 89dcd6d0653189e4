"""In-memory state engine for vision-care systems: roles, validation, providers, rate limits and proof-backed access."""

__version__ = "1.2.2"
__all__ = ["env", "validation", "rbac", "provider", "rate_limit", "zk"]