from typing import Annotated

from fastapi import APIRouter, Depends

from credkit.application.check_code import VerificationCodeChecker
from credkit.application.issue_code import VerificationCodeIssuer
from credkit.domain.entities import VerificationRequest
from credkit.presentation.dependencies import get_checker, get_issuer
from credkit.schemas.requests import CheckVerificationCodeIn, IssueVerificationCodeIn
from credkit.schemas.responses import CheckVerificationCodeOut, IssueVerificationCodeOut

router = APIRouter(prefix="/rpc", tags=["Verification"])


@router.post("/IssueVerificationCode", response_model=IssueVerificationCodeOut)
async def issue_verification_code(
    body: IssueVerificationCodeIn,
    issuer: Annotated[VerificationCodeIssuer, Depends(get_issuer)],
):
    result = await issuer.issue(VerificationRequest(body.address, body.request_type))
    return IssueVerificationCodeOut(
        status_code=int(result.status_code), message=result.message, code=result.code
    )


@router.post("/CheckVerificationCode", response_model=CheckVerificationCodeOut)
async def check_verification_code(
    body: CheckVerificationCodeIn,
    checker: Annotated[VerificationCodeChecker, Depends(get_checker)],
):
    result = await checker.check(body.address, body.code)
    return CheckVerificationCodeOut(
        status_code=int(result.status_code), message=result.message, is_valid=result.is_valid
    )
