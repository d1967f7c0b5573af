from __future__ import annotations

import logging
from typing import Any

import httpx

from credkit.domain.errors import EmailDeliveryFailed
from credkit.domain.ports.email_port import EmailPort

logger = logging.getLogger(__name__)


class HttpSmtpEmailAdapter(EmailPort):
    """
    Mail dispatcher backed by an HTTP relay.

    Each message is one ``POST {base_url}{send_path}`` with a JSON body
    (``to``, ``subject``, ``body`` and optionally ``html`` / ``from``).
    Transport errors and non-2xx replies surface as EmailDeliveryFailed.
    """

    def __init__(
        self,
        base_url: str,
        *,
        client: httpx.AsyncClient | None = None,
        timeout: float = 5.0,
        send_path: str = "/send",
        sender: str | None = None,
    ) -> None:
        path = send_path if send_path.startswith("/") else f"/{send_path}"
        self._url = base_url.rstrip("/") + path
        self._sender = sender
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    def _message(self, to: str, subject: str, body: str, html: str | None) -> dict[str, Any]:
        message: dict[str, Any] = {"to": to, "subject": subject, "body": body}
        if html is not None:
            message["html"] = html
        if self._sender:
            message["from"] = self._sender
        return message

    async def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        html: str | None = None,
        idempotency_key: str | None = None,
    ) -> None:
        headers = {"Idempotency-Key": idempotency_key} if idempotency_key else {}
        try:
            resp = await self._client.post(
                self._url, json=self._message(to, subject, body, html), headers=headers
            )
        except httpx.HTTPError as e:
            raise EmailDeliveryFailed(f"mail relay HTTP error: {e}") from e

        if not resp.is_success:
            raise EmailDeliveryFailed(
                f"mail relay responded {resp.status_code}: {resp.text[:200]}"
            )
        logger.debug("mail relay accepted message", extra={"to": to, "status": resp.status_code})

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()
