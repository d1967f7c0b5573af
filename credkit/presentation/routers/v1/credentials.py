from typing import Annotated

from fastapi import APIRouter, Depends

from credkit.application.credentials import CredentialHasher, CredentialVerifier
from credkit.presentation.dependencies import get_credential_hasher, get_credential_verifier
from credkit.schemas.requests import (
    AuthenticateCredentialResetIn,
    HashCredentialIn,
    VerifyCredentialIn,
)
from credkit.schemas.responses import (
    AuthenticateCredentialResetOut,
    HashCredentialOut,
    VerifyCredentialOut,
)

router = APIRouter(prefix="/rpc", tags=["Credentials"])


@router.post("/HashCredential", response_model=HashCredentialOut)
async def hash_credential(
    body: HashCredentialIn,
    hasher: Annotated[CredentialHasher, Depends(get_credential_hasher)],
):
    result = await hasher.hash_credential(body.plaintext)
    return HashCredentialOut(
        status_code=int(result.status_code),
        message=result.message,
        hash=result.hash,
        salt=result.salt,
    )


@router.post("/VerifyCredential", response_model=VerifyCredentialOut)
async def verify_credential(
    body: VerifyCredentialIn,
    verifier: Annotated[CredentialVerifier, Depends(get_credential_verifier)],
):
    result = await verifier.verify(body.plaintext, body.stored_hash)
    return VerifyCredentialOut(
        status_code=int(result.status_code), message=result.message, is_valid=result.is_valid
    )


@router.post("/AuthenticateCredentialReset", response_model=AuthenticateCredentialResetOut)
async def authenticate_credential_reset(
    body: AuthenticateCredentialResetIn,
    verifier: Annotated[CredentialVerifier, Depends(get_credential_verifier)],
):
    result = await verifier.authenticate_reset(body.stored_hash, body.presented_hash)
    return AuthenticateCredentialResetOut(
        status_code=int(result.status_code),
        message=result.message,
        is_authenticated=result.is_valid,
    )
