import logging

from credkit.application.issue_code import VerificationCodeIssuer
from credkit.domain.entities import CheckCodeResult, normalize_address
from credkit.domain.errors import CacheUnavailable
from credkit.domain.ports.verification_cache import VerificationCachePort
from credkit.domain.services import secure_compare
from credkit.domain.status import StatusCode


class VerificationCodeChecker:
    """Single-use check of a code previously handed out by the issuer."""

    def __init__(
        self,
        cache: VerificationCachePort,
        issuer: VerificationCodeIssuer,
        *,
        logger: logging.Logger | None = None,
    ) -> None:
        self._cache = cache
        self._issuer = issuer
        self._logger = logger or logging.getLogger(__name__)

    async def check(self, address: str, code: str) -> CheckCodeResult:
        address = normalize_address(address)
        code = (code or "").strip().upper()
        if not address or not code:
            return CheckCodeResult(StatusCode.FORM_PARAMS_MISSING, "address and code are required")

        key = self._issuer.key_for(address)
        try:
            live = await self._cache.get(key)
            if not live:
                return CheckCodeResult(StatusCode.CODE_EXPIRED, "verification code expired")
            if not secure_compare(live, code):
                self._logger.info("verification code mismatch", extra={"address": address})
                return CheckCodeResult(StatusCode.CODE_MISMATCH, "verification code mismatch")
            if not await self._cache.delete_if_equals(key, code):
                # consumed or replaced between the read and the delete
                return CheckCodeResult(StatusCode.CODE_EXPIRED, "verification code expired")
        except CacheUnavailable as e:
            self._logger.error("verification cache unavailable", extra={"error": str(e)})
            return CheckCodeResult(e.status_code, f"verification code lookup failed: {e}")

        self._logger.info("verification code accepted", extra={"address": address})
        return CheckCodeResult(StatusCode.SUCCESS, "verification code accepted", True)
