"""Best-effort notification dispatcher.

Wraps the email transport and mailing-list client.  Each capability
reports success as a bool; failures are logged with the recipient or list
and the underlying error and are never re-raised to the caller.

Usage::

    dispatcher = NotificationDispatcher(transport, mailing_list)
    await dispatcher.email(EmailMessage(...))
    await dispatcher.subscribe(Subscription(email=..., list_name="ordered"))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from digital_catalog.core.interfaces import IEmailTransport, IMailingListClient
from digital_catalog.core.models import EmailMessage, Subscription

logger = logging.getLogger(__name__)


@dataclass
class ChannelStats:
    name: str
    sent_count: int = field(default=0)
    error_count: int = field(default=0)


class NotificationDispatcher:
    """Sends transactional email and updates mailing-list subscriptions."""

    def __init__(
        self,
        transport: IEmailTransport,
        mailing_list: IMailingListClient,
    ) -> None:
        self._transport = transport
        self._mailing_list = mailing_list
        self._email_stats = ChannelStats(name="email")
        self._subscribe_stats = ChannelStats(name="mailing_list")

    async def email(self, message: EmailMessage) -> bool:
        """Send *message*.  Returns ``False`` on failure."""
        try:
            await self._transport.send(message)
        except Exception as exc:
            self._email_stats.error_count += 1
            logger.error(
                "Email sending error: to=%s subject=%s error=%s",
                message.to, message.subject, exc, exc_info=exc,
            )
            return False

        self._email_stats.sent_count += 1
        logger.info("Email sent: to=%s subject=%s", message.to, message.subject)
        return True

    async def subscribe(self, subscription: Subscription) -> bool:
        """Upsert *subscription* on its list.  Returns ``False`` on failure."""
        try:
            await self._mailing_list.subscribe(subscription)
        except Exception as exc:
            self._subscribe_stats.error_count += 1
            logger.error(
                "Mailing list subscribing error: list=%s email=%s error=%s",
                subscription.list_name, subscription.email, exc, exc_info=exc,
            )
            return False

        self._subscribe_stats.sent_count += 1
        logger.info(
            "Subscribed: list=%s email=%s",
            subscription.list_name, subscription.email,
        )
        return True

    # ---- Introspection ----

    def get_channel_stats(self) -> list[dict[str, Any]]:
        """Return per-channel send/error stats."""
        return [
            {"type": s.name, "sent": s.sent_count, "errors": s.error_count}
            for s in (self._email_stats, self._subscribe_stats)
        ]
