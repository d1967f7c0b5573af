from dataclasses import dataclass
from datetime import datetime

from credkit.domain.status import RequestType, StatusCode


def normalize_address(address: str | None) -> str:
    return (address or "").strip().lower()


@dataclass
class VerificationRequest:
    address: str
    request_type: int = RequestType.VERIFY_CODE

    def __post_init__(self):
        # delivery keeps the client's spelling; key_for() lowercases for lookup
        self.address = (self.address or "").strip()


@dataclass(frozen=True)
class VerificationRecord:
    key: str
    code: str
    expires_at: datetime | None = None


@dataclass(frozen=True)
class CredentialHashResult:
    hash: str
    salt: str


@dataclass(frozen=True)
class CredentialVerifyRequest:
    candidate: str
    stored_hash: str


@dataclass(frozen=True)
class IssueCodeResult:
    status_code: StatusCode
    message: str
    code: str = ""


@dataclass(frozen=True)
class CheckCodeResult:
    status_code: StatusCode
    message: str
    is_valid: bool = False


@dataclass(frozen=True)
class HashCredentialResult:
    status_code: StatusCode
    message: str
    hash: str = ""
    salt: str = ""


@dataclass(frozen=True)
class VerifyCredentialResult:
    status_code: StatusCode
    message: str
    is_valid: bool = False
