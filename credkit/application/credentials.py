from __future__ import annotations

import asyncio
import logging

from credkit.domain.entities import (
    CredentialHashResult,
    CredentialVerifyRequest,
    HashCredentialResult,
    VerifyCredentialResult,
)
from credkit.domain.errors import HashingFailed, VerificationFailed
from credkit.domain.ports.password_hasher import PasswordHasherPort
from credkit.domain.status import StatusCode


class CredentialHasher:
    def __init__(
        self, hasher: PasswordHasherPort, *, logger: logging.Logger | None = None
    ) -> None:
        self._hasher = hasher
        self._logger = logger or logging.getLogger(__name__)

    async def derive(self, plaintext: str) -> CredentialHashResult:
        """Hash off the event loop. Raises HashingFailed on a derivation fault."""
        try:
            hashed = await asyncio.to_thread(self._hasher.hash, plaintext)
            return CredentialHashResult(hash=hashed, salt=self._hasher.salt_of(hashed))
        except Exception as e:  # noqa: BLE001
            raise HashingFailed(str(e)) from e

    async def hash_credential(self, plaintext: str | None) -> HashCredentialResult:
        if not plaintext:
            self._logger.warning("hash rejected: plaintext missing")
            return HashCredentialResult(StatusCode.INVALID_PARAMS, "credential must not be empty")
        try:
            result = await self.derive(plaintext)
        except HashingFailed as e:
            self._logger.error("credential hashing failed", extra={"error": str(e)})
            return HashCredentialResult(e.status_code, f"credential hashing failed: {e}")
        self._logger.info("credential hashed")
        return HashCredentialResult(
            StatusCode.SUCCESS, "credential hashed", hash=result.hash, salt=result.salt
        )


class CredentialVerifier:
    """
    Checks a candidate credential against a stored self-describing hash.

    verify() and authenticate_reset() are two entry points over the same
    comparison; a mismatch is a successful call with a False answer.
    """

    def __init__(
        self, hasher: PasswordHasherPort, *, logger: logging.Logger | None = None
    ) -> None:
        self._hasher = hasher
        self._logger = logger or logging.getLogger(__name__)

    async def matches(self, request: CredentialVerifyRequest) -> bool:
        """Raises VerificationFailed when the stored hash cannot be used."""
        try:
            return await asyncio.to_thread(
                self._hasher.verify, request.candidate, request.stored_hash
            )
        except Exception as e:  # noqa: BLE001
            raise VerificationFailed(str(e)) from e

    async def verify(
        self, candidate: str | None, stored_hash: str | None
    ) -> VerifyCredentialResult:
        return await self._compare(candidate, stored_hash, workflow="verify")

    async def authenticate_reset(
        self, stored_hash: str | None, presented: str | None
    ) -> VerifyCredentialResult:
        return await self._compare(presented, stored_hash, workflow="reset")

    async def _compare(
        self, candidate: str | None, stored_hash: str | None, *, workflow: str
    ) -> VerifyCredentialResult:
        if not candidate or not stored_hash:
            self._logger.warning("%s rejected: parameters missing", workflow)
            return VerifyCredentialResult(
                StatusCode.FORM_PARAMS_MISSING, "credential parameters incomplete"
            )
        try:
            ok = await self.matches(CredentialVerifyRequest(candidate, stored_hash))
        except VerificationFailed as e:
            self._logger.error("%s failed", workflow, extra={"error": str(e)})
            return VerifyCredentialResult(e.status_code, f"credential verification failed: {e}")
        self._logger.info("%s completed", workflow, extra={"valid": ok})
        return VerifyCredentialResult(StatusCode.SUCCESS, "credential verification completed", ok)
