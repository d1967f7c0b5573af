from __future__ import annotations

import asyncio
import logging
import sys
import time
from collections import deque
from contextlib import suppress
from dataclasses import dataclass, field
from enum import Enum
from typing import Awaitable, Callable, Iterable, Protocol

from credkit.domain.errors import ProcessError

# StreamReader limit for worker pipes; longer lines are dropped
PIPE_LINE_LIMIT = 1024 * 1024
# transitions kept per service
HISTORY_LEN = 64


class ServiceState(str, Enum):
    STARTING = "starting"
    RUNNING = "running"
    EXITED_CLEAN = "exited_clean"
    EXITED_ERROR = "exited_error"
    RESTARTING = "restarting"
    FAILED = "failed"
    STOPPED = "stopped"


@dataclass(frozen=True)
class RestartPolicy:
    base: float = 1.0  # base delay (seconds)
    max_delay: float = 30.0  # cap (seconds)
    max_restarts: int = 5  # consecutive failures tolerated
    stable_after: float = 60.0  # uptime that clears the failure count

    def compute_delay(self, failures: int) -> float:
        # failures is the number of consecutive crashes so far (>= 1)
        # next delay = min(max_delay, base * 2**(failures - 1))
        delay = self.base * (2 ** max(0, failures - 1))
        return delay if delay < self.max_delay else self.max_delay


class WorkerHandle(Protocol):
    """What the supervisor needs from a launched worker (asyncio.subprocess.Process fits)."""

    pid: int | None
    returncode: int | None
    stdout: asyncio.StreamReader | None
    stderr: asyncio.StreamReader | None

    async def wait(self) -> int: ...

    def terminate(self) -> None: ...

    def kill(self) -> None: ...


@dataclass(frozen=True)
class ServiceSpec:
    name: str
    argv: tuple[str, ...]
    log_file: str | None = None

    @classmethod
    def for_worker(cls, name: str, log_file: str | None = None) -> "ServiceSpec":
        argv = (sys.executable, "-m", "credkit.presentation.serve", name)
        if log_file:
            argv += ("--log-file", log_file)
        return cls(name=name, argv=argv, log_file=log_file)


@dataclass
class ServiceProcess:
    spec: ServiceSpec
    state: ServiceState = ServiceState.STARTING
    handle: WorkerHandle | None = None
    failures: int = 0
    last_exit_code: int | None = None
    history: deque[ServiceState] = field(default_factory=lambda: deque(maxlen=HISTORY_LEN))

    @property
    def name(self) -> str:
        return self.spec.name

    def transition(self, state: ServiceState) -> None:
        self.state = state
        self.history.append(state)


Launcher = Callable[[ServiceSpec], Awaitable[WorkerHandle]]


async def launch_subprocess(spec: ServiceSpec) -> WorkerHandle:
    try:
        return await asyncio.create_subprocess_exec(
            *spec.argv,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            limit=PIPE_LINE_LIMIT,
        )
    except OSError as e:
        raise ProcessError(spec.name, f"launch failed: {e}") from e


class ProcessSupervisor:
    """
    Runs each service as its own worker process and keeps it alive.

    Crashes (non-zero exit or death by signal) are restarted with exponential
    backoff until the policy's budget is spent, then the service is parked in
    FAILED. A clean exit (status 0) is final. Worker stdout lines are relayed
    as info, stderr lines as errors, and every exit is logged.
    """

    def __init__(
        self,
        specs: Iterable[ServiceSpec],
        *,
        launcher: Launcher = launch_subprocess,
        policy: RestartPolicy | None = None,
        kill_timeout: float = 10.0,
        clock: Callable[[], float] = time.monotonic,
        logger: logging.Logger | None = None,
    ) -> None:
        self.services = {s.name: ServiceProcess(spec=s) for s in specs}
        self.launcher = launcher
        self.policy = policy or RestartPolicy()
        self.kill_timeout = kill_timeout
        self._clock = clock
        self._logger = logger or logging.getLogger(__name__)
        self._stopping = asyncio.Event()

    @property
    def stopping(self) -> bool:
        return self._stopping.is_set()

    def failed_services(self) -> list[str]:
        return [n for n, p in self.services.items() if p.state is ServiceState.FAILED]

    async def run(self) -> int:
        """
        Supervise every service until each reaches a terminal state.
        Returns 1 if any service ended FAILED, else 0.
        """
        self._logger.info(
            "supervisor started",
            extra={"services": list(self.services), "max_restarts": self.policy.max_restarts},
        )
        await asyncio.gather(*(self._supervise(p) for p in self.services.values()))
        if self.stopping:
            return 0
        return 1 if self.failed_services() else 0

    async def shutdown(self) -> None:
        """Stop restarting and terminate every running worker."""
        self._logger.info("supervisor shutting down")
        self._stopping.set()
        await asyncio.gather(
            *(self._terminate(p) for p in self.services.values() if p.handle is not None)
        )

    async def _supervise(self, proc: ServiceProcess) -> None:
        while not self.stopping:
            proc.transition(ServiceState.STARTING)
            self._logger.info("starting service", extra={"service": proc.name})
            try:
                proc.handle = await self.launcher(proc.spec)
            except ProcessError as e:
                code = None
                started_at = self._clock()
                self._logger.error(str(e), extra={"service": proc.name})
            else:
                if self.stopping:
                    await self._terminate(proc)
                proc.transition(ServiceState.RUNNING)
                started_at = self._clock()
                self._logger.info(
                    "service running", extra={"service": proc.name, "pid": proc.handle.pid}
                )
                code = await self._watch(proc)

            proc.last_exit_code = code
            if self.stopping:
                proc.transition(ServiceState.STOPPED)
                self._logger.info("service stopped", extra={"service": proc.name, "code": code})
                return

            if code == 0:
                proc.transition(ServiceState.EXITED_CLEAN)
                self._logger.info("service exited cleanly", extra={"service": proc.name})
                return

            proc.transition(ServiceState.EXITED_ERROR)
            if self._clock() - started_at >= self.policy.stable_after:
                proc.failures = 0
            proc.failures += 1
            self._logger.warning(
                "service exited abnormally",
                extra={
                    "service": proc.name,
                    "code": code,
                    "signal": -code if code is not None and code < 0 else None,
                    "failures": proc.failures,
                },
            )

            if proc.failures > self.policy.max_restarts:
                proc.transition(ServiceState.FAILED)
                self._logger.critical(
                    "service failed permanently; restart budget exhausted",
                    extra={"service": proc.name, "failures": proc.failures, "code": code},
                )
                return

            proc.transition(ServiceState.RESTARTING)
            delay = self.policy.compute_delay(proc.failures)
            self._logger.info(
                "restarting service", extra={"service": proc.name, "retry_in_s": delay}
            )
            with suppress(asyncio.TimeoutError):
                await asyncio.wait_for(self._stopping.wait(), timeout=delay)

        proc.transition(ServiceState.STOPPED)

    async def _watch(self, proc: ServiceProcess) -> int:
        handle = proc.handle
        pumps = [
            asyncio.create_task(self._relay(proc.name, handle.stdout, logging.INFO, "message")),
            asyncio.create_task(self._relay(proc.name, handle.stderr, logging.ERROR, "error")),
        ]
        code = await handle.wait()
        for result in await asyncio.gather(*pumps, return_exceptions=True):
            if isinstance(result, Exception):
                self._logger.error(
                    "output relay failed", extra={"service": proc.name, "error": repr(result)}
                )
        return code

    async def _relay(
        self,
        name: str,
        stream: asyncio.StreamReader | None,
        level: int,
        kind: str,
    ) -> None:
        if stream is None:
            return
        while True:
            try:
                line = await stream.readline()
            except ValueError:
                # line over the reader limit; readline already discarded it
                self._logger.warning(
                    f"[{name}] {kind}: oversized line dropped", extra={"service": name}
                )
                continue
            if not line:
                return
            text = line.decode("utf-8", errors="replace").rstrip()
            if text:
                self._logger.log(level, f"[{name}] {kind}: {text}", extra={"service": name})

    async def _terminate(self, proc: ServiceProcess) -> None:
        handle = proc.handle
        if handle is None or handle.returncode is not None:
            return
        with suppress(ProcessLookupError):
            handle.terminate()
        try:
            await asyncio.wait_for(handle.wait(), timeout=self.kill_timeout)
        except asyncio.TimeoutError:
            self._logger.warning("service did not stop in time; killing", extra={"service": proc.name})
            with suppress(ProcessLookupError):
                handle.kill()
            await handle.wait()
