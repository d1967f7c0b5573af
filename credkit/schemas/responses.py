from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RpcOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    status_code: int = Field(..., description="In-band outcome, 0 on success")
    message: str = ""


class IssueVerificationCodeOut(RpcOut):
    code: str = ""


class CheckVerificationCodeOut(RpcOut):
    is_valid: bool = False


class HashCredentialOut(RpcOut):
    hash: str = ""
    salt: str = ""


class VerifyCredentialOut(RpcOut):
    is_valid: bool = False


class AuthenticateCredentialResetOut(RpcOut):
    is_authenticated: bool = False
