from typing import Protocol


class PasswordHasherPort(Protocol):
    """Blocking salted one-way hash; callers decide where it runs."""

    def hash(self, plaintext: str) -> str:
        """Return a self-describing hash string (scheme, cost, salt, digest)."""

    def verify(self, plaintext: str, stored_hash: str) -> bool:
        """Constant-time check of plaintext against stored_hash. Raises ValueError on a malformed hash."""

    def salt_of(self, stored_hash: str) -> str:
        """The salt embedded in stored_hash."""
