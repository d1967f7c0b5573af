from __future__ import annotations

import logging
import sys

import uvicorn

from credkit.main import APP_FACTORIES, create_app
from credkit.settings import get_settings

logger = logging.getLogger(__name__)


def bind_address(service: str) -> tuple[str, int]:
    settings = get_settings()
    if service == "verification":
        return settings.verification_host, settings.verification_port
    return settings.cipher_host, settings.cipher_port


def parse_args(argv: list[str]) -> tuple[str, str | None] | None:
    """``serve <service> [--log-file PATH]`` -> (service, log_file)."""
    args = argv[1:]
    if not args or args[0] not in APP_FACTORIES:
        return None
    service, rest = args[0], args[1:]
    log_file = None
    if rest:
        if len(rest) != 2 or rest[0] != "--log-file":
            return None
        log_file = rest[1]
    return service, log_file


def main(argv: list[str] | None = None) -> int:
    parsed = parse_args(sys.argv if argv is None else argv)
    if parsed is None:
        print(
            "usage: python -m credkit.presentation.serve "
            f"[{'|'.join(APP_FACTORIES)}] [--log-file PATH]",
            file=sys.stderr,
        )
        return 2
    service, log_file = parsed

    settings = get_settings()
    if log_file:
        settings = settings.model_copy(update={"log_file": log_file})
    app = create_app(service, settings)

    host, port = bind_address(service)
    logger.info("worker starting", extra={"service": service, "host": host, "port": port})
    # log_config=None keeps uvicorn on our root handler
    uvicorn.run(app, host=host, port=port, log_config=None)
    logger.info("worker stopped", extra={"service": service})
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
