from credkit.domain.status import StatusCode


class DomainError(Exception):
    """Base class for all domain-level errors."""

    status_code: StatusCode = StatusCode.INTERNAL_EXCEPTION


class ValidationError(DomainError):
    """A required field is missing or empty."""

    status_code = StatusCode.INVALID_PARAMS


class DependencyError(DomainError):
    """A collaborator (cache, mail relay) is unreachable or failing."""

    pass


class CacheUnavailable(DependencyError):
    """The cache store rejected or could not serve an operation."""

    status_code = StatusCode.CACHE_ERROR


class EmailDeliveryFailed(DependencyError):
    """The mail relay did not accept the message."""

    status_code = StatusCode.EMAIL_SEND_FAILED


class CryptoError(DomainError):
    """Hash derivation or comparison fault."""

    pass


class HashingFailed(CryptoError):
    status_code = StatusCode.HASH_ERROR


class VerificationFailed(CryptoError):
    status_code = StatusCode.VERIFY_ERROR


class ProcessError(Exception):
    """A supervised worker could not be launched or crashed."""

    def __init__(self, service: str, message: str) -> None:
        super().__init__(f"[{service}] {message}")
        self.service = service
