from enum import IntEnum


class StatusCode(IntEnum):
    """In-band outcome carried by every RPC response."""

    SUCCESS = 0
    CACHE_ERROR = 1
    INTERNAL_EXCEPTION = 2
    EMAIL_SEND_FAILED = 3
    CODE_EXPIRED = 4
    CODE_MISMATCH = 5
    HASH_ERROR = 6
    VERIFY_ERROR = 7
    CIPHER_AUTH_FAILED = 7
    INVALID_PARAMS = 8
    FORM_PARAMS_MISSING = 8


class RequestType(IntEnum):
    VERIFY_CODE = 0
    LOGIN = 1
    REGISTER = 2
    RESET_PASSWORD = 3
    AUTHENTICATE_USER = 4
