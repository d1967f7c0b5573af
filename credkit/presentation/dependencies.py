import logging

from fastapi import Request

from credkit.application.check_code import VerificationCodeChecker
from credkit.application.credentials import CredentialHasher, CredentialVerifier
from credkit.application.issue_code import VerificationCodeIssuer
from credkit.infrastructure.redis_cache.verification_cache import RedisVerificationCache
from credkit.settings import get_settings


def get_issuer(request: Request) -> VerificationCodeIssuer:
    # app.state.redis / app.state.email_adapter are set in credkit.main lifespan
    settings = get_settings()
    return VerificationCodeIssuer(
        RedisVerificationCache(request.app.state.redis),
        request.app.state.email_adapter,
        ttl_seconds=settings.code_ttl_seconds,
        key_prefix=settings.code_key_prefix,
        code_length=settings.code_length,
        product_name=settings.mail_product_name,
        logger=logging.getLogger("credkit.verification"),
    )


def get_checker(request: Request) -> VerificationCodeChecker:
    cache = RedisVerificationCache(request.app.state.redis)
    return VerificationCodeChecker(
        cache, get_issuer(request), logger=logging.getLogger("credkit.verification")
    )


def get_credential_hasher(request: Request) -> CredentialHasher:
    return CredentialHasher(
        request.app.state.password_hasher, logger=logging.getLogger("credkit.cipher")
    )


def get_credential_verifier(request: Request) -> CredentialVerifier:
    return CredentialVerifier(
        request.app.state.password_hasher, logger=logging.getLogger("credkit.cipher")
    )
