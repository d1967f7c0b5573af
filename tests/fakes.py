import asyncio
from typing import Any

from credkit.domain.errors import CacheUnavailable, EmailDeliveryFailed


class FakeClock:
    def __init__(self, start: float = 1_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeVerificationCache:
    """In-memory cache store with expiry driven by a FakeClock."""

    def __init__(self, clock: FakeClock | None = None) -> None:
        self.clock = clock or FakeClock()
        self._data: dict[str, tuple[str, float]] = {}
        self.calls: list[tuple] = []

    def _live(self, key: str) -> str | None:
        item = self._data.get(key)
        if item is None:
            return None
        value, expires_at = item
        if self.clock() >= expires_at:
            del self._data[key]
            return None
        return value

    async def get(self, key: str) -> str | None:
        self.calls.append(("get", key))
        return self._live(key)

    async def set_with_expiry(self, key: str, value: str, ttl_seconds: int) -> None:
        self.calls.append(("set", key, value, ttl_seconds))
        self._data[key] = (value, self.clock() + ttl_seconds)

    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        self.calls.append(("set_nx", key, value, ttl_seconds))
        if self._live(key) is not None:
            return False
        self._data[key] = (value, self.clock() + ttl_seconds)
        return True

    async def exists(self, key: str) -> bool:
        return self._live(key) is not None

    async def delete(self, key: str) -> None:
        self.calls.append(("delete", key))
        self._data.pop(key, None)

    async def delete_if_equals(self, key: str, value: str) -> bool:
        self.calls.append(("delete_if_equals", key, value))
        if self._live(key) != value:
            return False
        del self._data[key]
        return True


class FakeErroredVerificationCache(FakeVerificationCache):
    async def get(self, key: str) -> str | None:
        raise CacheUnavailable("Redis down")


class FakeWriteFailingCache(FakeVerificationCache):
    async def set_if_absent(self, key: str, value: str, ttl_seconds: int) -> bool:
        raise CacheUnavailable("Redis read-only")


class FakeSlowClaimCache(FakeVerificationCache):
    """Yields between the read and the claim so concurrent issuers interleave."""

    async def get(self, key: str) -> str | None:
        value = await super().get(key)
        await asyncio.sleep(0)
        return value


class FakeEmailOK:
    def __init__(self):
        self.calls: list[dict[str, Any]] = []

    async def send(
        self, *, to: str, subject: str, body: str, html=None, idempotency_key=None
    ) -> None:
        await asyncio.sleep(0)
        self.calls.append(
            {
                "to": to,
                "subject": subject,
                "body": body,
                "html": html,
                "idempotency_key": idempotency_key,
            }
        )

    async def aclose(self) -> None:
        return None


class FakeEmailFailing:
    def __init__(self):
        self.calls: int = 0

    async def send(
        self, *, to: str, subject: str, body: str, html=None, idempotency_key=None
    ) -> None:
        self.calls += 1
        raise EmailDeliveryFailed("relay refused")

    async def aclose(self) -> None:
        return None


class FakePasswordHasher:
    def __init__(self, fail_hash: bool = False):
        self.fail_hash = fail_hash

    def hash(self, plaintext: str) -> str:
        if self.fail_hash:
            raise RuntimeError("backend unavailable")
        return "$2b$04$" + "s" * 22 + plaintext.rjust(31, "x")

    def verify(self, plaintext: str, stored_hash: str) -> bool:
        if not stored_hash.startswith("$2b$"):
            raise ValueError("hash could not be identified")
        return stored_hash.endswith(plaintext.rjust(31, "x"))

    def salt_of(self, stored_hash: str) -> str:
        return stored_hash[:-31]


class FakeProcess:
    """Stands in for asyncio.subprocess.Process; exits with a preset code."""

    _next_pid = 100

    def __init__(self, exit_code: int = 0, *, hold: bool = False, stdout=None, stderr=None):
        FakeProcess._next_pid += 1
        self.pid = FakeProcess._next_pid
        self.returncode: int | None = None
        self.stdout = stdout
        self.stderr = stderr
        self.terminated = False
        self.killed = False
        self._exit_code = exit_code
        self._exited = asyncio.Event()
        if not hold:
            self._finish(exit_code)

    def _finish(self, code: int) -> None:
        self.returncode = code
        self._exited.set()

    async def wait(self) -> int:
        await self._exited.wait()
        return self.returncode

    def terminate(self) -> None:
        self.terminated = True
        self._finish(-15)

    def kill(self) -> None:
        self.killed = True
        self._finish(-9)


def stream_of(*lines: str) -> asyncio.StreamReader:
    reader = asyncio.StreamReader()
    for line in lines:
        reader.feed_data((line + "\n").encode("utf-8"))
    reader.feed_eof()
    return reader


class FakeLauncher:
    """Hands out processes from a script, one per launch."""

    def __init__(self, script: dict[str, list]):
        self.script = {name: list(items) for name, items in script.items()}
        self.launches: list[str] = []
        self.processes: list[FakeProcess] = []

    async def __call__(self, spec) -> FakeProcess:
        self.launches.append(spec.name)
        item = self.script[spec.name].pop(0)
        if isinstance(item, BaseException):
            raise item
        proc = item if isinstance(item, FakeProcess) else FakeProcess(exit_code=item)
        self.processes.append(proc)
        return proc
