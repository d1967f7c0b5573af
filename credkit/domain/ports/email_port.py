from __future__ import annotations

from typing import Protocol


class EmailPort(Protocol):
    async def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        html: str | None = None,
        idempotency_key: str | None = None,
    ) -> None:
        """Send an email. Raises EmailDeliveryFailed when the relay refuses it."""

    async def aclose(self) -> None:
        """Release any transport the adapter owns."""
