import pytest

from credkit.application.check_code import VerificationCodeChecker
from credkit.application.issue_code import VerificationCodeIssuer
from credkit.settings import get_settings
from tests.fakes import (
    FakeClock,
    FakeEmailFailing,
    FakeEmailOK,
    FakeErroredVerificationCache,
    FakeVerificationCache,
)


@pytest.fixture()
def clock():
    return FakeClock()


@pytest.fixture()
def cache(clock):
    return FakeVerificationCache(clock)


@pytest.fixture()
def errored_cache():
    return FakeErroredVerificationCache()


@pytest.fixture()
def mailer():
    return FakeEmailOK()


@pytest.fixture()
def failing_mailer():
    return FakeEmailFailing()


@pytest.fixture()
def issuer(cache, mailer):
    return VerificationCodeIssuer(cache, mailer)


@pytest.fixture()
def checker(cache, issuer):
    return VerificationCodeChecker(cache, issuer)


@pytest.fixture(autouse=True)
def fresh_settings():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
