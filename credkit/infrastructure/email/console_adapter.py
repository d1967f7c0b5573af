import logging

from credkit.domain.ports.email_port import EmailPort


class ConsoleEmailAdapter(EmailPort):
    """
    Development mailer: logs the message instead of delivering it.

    Never fails, so issuance always reaches the cache step.
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger(__name__)

    async def send(
        self,
        *,
        to: str,
        subject: str,
        body: str,
        html: str | None = None,
        idempotency_key: str | None = None,
    ) -> None:
        self._logger.info(
            "console email",
            extra={"to": to, "subject": subject, "body": body, "idempotency_key": idempotency_key},
        )

    async def aclose(self) -> None:
        return None
