from __future__ import annotations

from passlib.context import CryptContext

from credkit.domain.ports.password_hasher import PasswordHasherPort

# bcrypt modular-crypt layout: "$2b$" + cost + "$" + 22-char salt + 31-char digest
_BCRYPT_DIGEST_LEN = 31


class BcryptPasswordHasher(PasswordHasherPort):
    """
    bcrypt through passlib. One CryptContext per hasher, cost fixed at
    construction. passlib's verify() compares digests in constant time.
    """

    def __init__(self, rounds: int = 10) -> None:
        self.rounds = rounds
        self._pwd = CryptContext(
            schemes=["bcrypt"], deprecated="auto", bcrypt__rounds=rounds
        )

    def hash(self, plaintext: str) -> str:
        return self._pwd.hash(plaintext)

    def verify(self, plaintext: str, stored_hash: str) -> bool:
        return self._pwd.verify(plaintext, stored_hash)

    def salt_of(self, stored_hash: str) -> str:
        """
        The ``$2b$<cost>$<salt>`` prefix of a bcrypt hash, i.e. the salt
        setting that produced it.
        """
        if len(stored_hash) <= _BCRYPT_DIGEST_LEN or not stored_hash.startswith("$2"):
            raise ValueError("not a bcrypt hash")
        return stored_hash[:-_BCRYPT_DIGEST_LEN]
