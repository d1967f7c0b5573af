from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class RpcIn(BaseModel):
    # missing fields arrive as "" and are rejected in-band by the services
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class IssueVerificationCodeIn(RpcIn):
    address: str = Field("", description="Email address the code is sent to", max_length=255)
    request_type: int = Field(0, description="Workflow the code is issued for")


class CheckVerificationCodeIn(RpcIn):
    address: str = Field("", max_length=255)
    code: str = Field("", max_length=32)


class HashCredentialIn(RpcIn):
    plaintext: str = Field("", description="Credential to hash")


class VerifyCredentialIn(RpcIn):
    plaintext: str = ""
    stored_hash: str = ""


class AuthenticateCredentialResetIn(RpcIn):
    stored_hash: str = ""
    presented_hash: str = ""
