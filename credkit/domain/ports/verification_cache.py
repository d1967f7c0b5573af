from typing import Protocol


class VerificationCachePort(Protocol):
    """Key-value store with native per-key expiry. Failures raise CacheUnavailable."""

    async def get(self, key: str) -> str | None:
        """Live value, or None when absent or expired."""

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        """Store/replace value with TTL=ttl_seconds."""

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        """Atomically store value with TTL unless key is live. True if stored."""

    async def exists(self, key: str) -> bool:
        """True if key holds a live value."""

    async def delete(self, key: str) -> None:
        """Delete key if present."""

    async def delete_if_equals(self, key: str, value: str) -> bool:
        """Atomic compare-and-delete. True if the key held value and was deleted."""
