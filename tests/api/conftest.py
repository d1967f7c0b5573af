import pytest
from fastapi.testclient import TestClient

from credkit.application.check_code import VerificationCodeChecker
from credkit.application.credentials import CredentialHasher, CredentialVerifier
from credkit.application.issue_code import VerificationCodeIssuer
from credkit.infrastructure.security.password import BcryptPasswordHasher
from credkit.main import create_cipher_app, create_verification_app
from credkit.presentation.dependencies import (
    get_checker,
    get_credential_hasher,
    get_credential_verifier,
    get_issuer,
)
from credkit.settings import Settings
from tests.fakes import FakeEmailOK, FakeVerificationCache


@pytest.fixture()
def verification_app_and_deps():
    app = create_verification_app(Settings())
    cache = FakeVerificationCache()
    mailer = FakeEmailOK()
    issuer = VerificationCodeIssuer(cache, mailer)
    checker = VerificationCodeChecker(cache, issuer)

    app.dependency_overrides[get_issuer] = lambda: issuer
    app.dependency_overrides[get_checker] = lambda: checker

    try:
        yield app, cache, mailer
    finally:
        app.dependency_overrides.clear()


@pytest.fixture()
def verification_client(verification_app_and_deps):
    app, _, _ = verification_app_and_deps
    # no context manager: the Redis lifespan is not entered
    return TestClient(app)


@pytest.fixture()
def cipher_client():
    app = create_cipher_app(Settings())
    hasher = BcryptPasswordHasher(rounds=4)
    app.dependency_overrides[get_credential_hasher] = lambda: CredentialHasher(hasher)
    app.dependency_overrides[get_credential_verifier] = lambda: CredentialVerifier(hasher)
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
