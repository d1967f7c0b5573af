import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from redis.asyncio import Redis

from credkit.domain.ports.email_port import EmailPort
from credkit.domain.errors import ValidationError
from credkit.infrastructure.email.console_adapter import ConsoleEmailAdapter
from credkit.infrastructure.email.http_smtp_adapter import HttpSmtpEmailAdapter
from credkit.infrastructure.security.password import BcryptPasswordHasher
from credkit.logging import setup_logging
from credkit.presentation.api import cipher_api, verification_api
from credkit.settings import Settings, get_settings


def build_email_adapter(settings: Settings) -> EmailPort:
    if settings.email_backend == "console":
        return ConsoleEmailAdapter()
    return HttpSmtpEmailAdapter(
        base_url=settings.smtp_base_url, timeout=settings.smtp_timeout_seconds
    )


@asynccontextmanager
async def verification_lifespan(app: FastAPI):
    # startup
    settings = app.state.settings
    app.state.redis = Redis.from_url(
        settings.redis_url, encoding="utf-8", decode_responses=True
    )
    app.state.email_adapter = build_email_adapter(settings)
    try:
        yield
    finally:
        # shutdown
        await app.state.email_adapter.aclose()
        await app.state.redis.aclose()


@asynccontextmanager
async def cipher_lifespan(app: FastAPI):
    app.state.password_hasher = BcryptPasswordHasher(app.state.settings.bcrypt_rounds)
    yield


async def invalid_params_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    # every RPC answers in-band, malformed bodies included
    errors = exc.errors()
    detail = errors[0]["msg"] if errors else "malformed body"
    return JSONResponse(
        status_code=200,
        content={
            "statusCode": int(ValidationError.status_code),
            "message": f"invalid request: {detail}",
        },
    )


def _create(title: str, api, lifespan, settings: Settings | None) -> FastAPI:
    settings = settings or get_settings()
    app = FastAPI(title=title, version="0.1.0", lifespan=lifespan)
    app.state.settings = settings
    app.add_exception_handler(RequestValidationError, invalid_params_handler)
    app.include_router(api)
    return app


def create_verification_app(settings: Settings | None = None) -> FastAPI:
    return _create("verification", verification_api, verification_lifespan, settings)


def create_cipher_app(settings: Settings | None = None) -> FastAPI:
    return _create("cipher", cipher_api, cipher_lifespan, settings)


APP_FACTORIES = {
    "verification": create_verification_app,
    "cipher": create_cipher_app,
}


def create_app(service: str, settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings.log_level, settings.log_file)
    try:
        factory = APP_FACTORIES[service]
    except KeyError:
        raise ValueError(f"unknown service: {service}") from None
    app = factory(settings)
    logging.getLogger(__name__).info(
        "app created", extra={"service": service, "env": settings.app_env}
    )
    return app
