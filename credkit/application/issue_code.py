from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable

import credkit.domain.services as domain_services
from credkit.domain.entities import (
    IssueCodeResult,
    VerificationRecord,
    VerificationRequest,
    normalize_address,
)
from credkit.domain.errors import CacheUnavailable, DomainError
from credkit.domain.ports.email_port import EmailPort
from credkit.domain.ports.verification_cache import VerificationCachePort
from credkit.domain.status import StatusCode


class VerificationCodeIssuer:
    """
    Issues one-time codes, at most one live code per address.

    A code is claimed in the cache with set-if-absent before the email goes
    out, so concurrent requests for the same address converge on one code and
    one email. If the email cannot be sent the claim is withdrawn again.
    """

    def __init__(
        self,
        cache: VerificationCachePort,
        email: EmailPort,
        *,
        ttl_seconds: int = 300,
        key_prefix: str = "verification_code_",
        code_length: int = 6,
        product_name: str = "Flicker",
        generate_code: Callable[[int], str] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self._cache = cache
        self._email = email
        self.ttl_seconds = ttl_seconds
        self.key_prefix = key_prefix
        self.code_length = code_length
        self._product = product_name
        self._generate_code = generate_code or domain_services.generate_verification_code
        self._logger = logger or logging.getLogger(__name__)

    def key_for(self, address: str) -> str:
        return f"{self.key_prefix}{normalize_address(address)}"

    async def issue(self, request: VerificationRequest) -> IssueCodeResult:
        if not request.address:
            self._logger.warning("issue rejected: address missing")
            return IssueCodeResult(StatusCode.FORM_PARAMS_MISSING, "address is required")

        self._logger.info(
            "verification code requested",
            extra={"address": request.address, "request_type": int(request.request_type)},
        )
        try:
            return await self._issue(request)
        except Exception as e:  # noqa: BLE001
            self._logger.exception("issue failed unexpectedly", extra={"address": request.address})
            return IssueCodeResult(StatusCode.INTERNAL_EXCEPTION, f"internal error: {e}")

    async def _issue(self, request: VerificationRequest) -> IssueCodeResult:
        key = self.key_for(request.address)

        try:
            existing = await self._cache.get(key)
        except CacheUnavailable as e:
            return self._failed(e, request.address)
        if existing:
            self._logger.info("reusing live verification code", extra={"address": request.address})
            return IssueCodeResult(StatusCode.SUCCESS, "verification code sent", existing)

        code = self._generate_code(self.code_length)
        try:
            record = await self._claim(key, code)
        except CacheUnavailable as e:
            return self._failed(e, request.address)

        if record is None:
            # another request for this address claimed the key first
            try:
                winner = await self._cache.get(key)
            except CacheUnavailable as e:
                return self._failed(e, request.address)
            if winner:
                self._logger.info(
                    "concurrent issuance resolved to existing code",
                    extra={"address": request.address},
                )
                return IssueCodeResult(StatusCode.SUCCESS, "verification code sent", winner)
            return IssueCodeResult(
                StatusCode.CACHE_ERROR, "verification code changed concurrently, retry"
            )

        subject, text, html = domain_services.compose_verification_email(
            code,
            ttl_seconds=self.ttl_seconds,
            request_type=request.request_type,
            product=self._product,
        )
        try:
            await self._email.send(
                to=request.address,
                subject=subject,
                body=text,
                html=html,
                idempotency_key=f"{key}:{code}",
            )
        except Exception as e:  # noqa: BLE001
            await self._withdraw(record)
            self._logger.error(
                "verification email failed",
                extra={"address": request.address, "error": str(e)},
            )
            return IssueCodeResult(
                StatusCode.EMAIL_SEND_FAILED, f"failed to send verification code: {e}"
            )

        self._logger.info(
            "verification code issued",
            extra={"address": request.address, "ttl_s": self.ttl_seconds},
        )
        return IssueCodeResult(StatusCode.SUCCESS, "verification code sent", code)

    async def invalidate(self, address: str) -> None:
        """Drop any live code for address; the next issue() generates and mails a new one."""
        await self._cache.delete(self.key_for(address))

    async def _claim(self, key: str, code: str) -> VerificationRecord | None:
        stored = await self._cache.set_if_absent(key, code, self.ttl_seconds)
        if not stored:
            return None
        expires_at = datetime.now(timezone.utc) + timedelta(seconds=self.ttl_seconds)
        return VerificationRecord(key=key, code=code, expires_at=expires_at)

    async def _withdraw(self, record: VerificationRecord) -> None:
        try:
            await self._cache.delete_if_equals(record.key, record.code)
        except CacheUnavailable:
            # left to expire on its own
            self._logger.warning(
                "could not withdraw unsent verification code", extra={"key": record.key}
            )

    def _failed(self, error: DomainError, address: str) -> IssueCodeResult:
        self._logger.error(
            "verification cache unavailable", extra={"address": address, "error": str(error)}
        )
        return IssueCodeResult(error.status_code, f"verification code storage failed: {error}")
