from __future__ import annotations

import asyncio
import logging
import os
import signal
from contextlib import suppress

from credkit.infrastructure.supervisor.supervisor import (
    ProcessSupervisor,
    RestartPolicy,
    ServiceSpec,
)
from credkit.logging import setup_logging, shutdown_logging
from credkit.settings import Settings, get_settings

logger = logging.getLogger(__name__)


def build_supervisor(settings: Settings) -> ProcessSupervisor:
    specs = []
    for name in settings.service_names():
        log_file = None
        if settings.supervisor_log_dir:
            log_file = os.path.join(settings.supervisor_log_dir, f"{name}.log")
        specs.append(ServiceSpec.for_worker(name, log_file=log_file))

    return ProcessSupervisor(
        specs,
        policy=RestartPolicy(
            base=settings.supervisor_backoff_base,
            max_delay=settings.supervisor_backoff_max,
            max_restarts=settings.supervisor_max_restarts,
            stable_after=settings.supervisor_stable_seconds,
        ),
        kill_timeout=settings.supervisor_kill_timeout,
        logger=logging.getLogger("credkit.supervisor"),
    )


async def _run() -> int:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_file)

    supervisor = build_supervisor(settings)
    stop = asyncio.Event()

    def _on_signal(*_: object) -> None:
        logger.info("supervisor: stop signal received")
        stop.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with suppress(NotImplementedError):
            loop.add_signal_handler(sig, _on_signal)

    run_task = asyncio.create_task(supervisor.run())
    stop_task = asyncio.create_task(stop.wait())
    await asyncio.wait({run_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

    if stop.is_set():
        await supervisor.shutdown()
        await run_task
        logger.info("supervisor: stopped cleanly")
        return 0

    stop_task.cancel()
    with suppress(asyncio.CancelledError):
        await stop_task
    code = run_task.result()
    if code:
        logger.critical(
            "supervisor: services failed", extra={"failed": supervisor.failed_services()}
        )
    else:
        logger.info("supervisor: all services exited cleanly")
    return code


def main() -> None:
    try:
        code = asyncio.run(_run())
    finally:
        shutdown_logging()
    raise SystemExit(code)


if __name__ == "__main__":
    main()
