"""Application layer service for ticket-issuance requests."""

import logging
from datetime import datetime, timezone
from typing import Callable, Optional

from app.core.config.settings import Settings, settings as default_settings
from app.modules.ticket_module.domain.constants import (
    DEFAULTS,
    SUMMARY_TEMPLATE,
    UNKNOWN_DATE,
    UNKNOWN_EVENT,
)
from app.modules.ticket_module.domain.models import (
    ContractDetails,
    EventDetails,
    NftTicket,
    TicketAttribute,
    TicketMetadata,
)

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def format_timestamp(moment: datetime) -> str:
    """Format like JavaScript's toISOString: millisecond precision, Z suffix."""
    moment = moment.astimezone(timezone.utc)
    return moment.isoformat(timespec="milliseconds").replace("+00:00", "Z")


class TicketService:
    """Builds ticket-issuance requests from collected event fields."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.settings = settings or default_settings
        self.clock = clock

    def create_ticket_with_defaults(
        self, event_name: Optional[str], event_date: Optional[str]
    ) -> NftTicket:
        """Create a ticket with the default contract parameters."""
        ticket = NftTicket(
            type=DEFAULTS["type"],
            event_details=EventDetails(
                name=event_name or UNKNOWN_EVENT,
                date=event_date or UNKNOWN_DATE,
            ),
            contract_details=ContractDetails(
                ticket_price=self.settings.ticket_price,
                max_supply=self.settings.ticket_max_supply,
                transferable=self.settings.ticket_transferable,
                refundable=self.settings.ticket_refundable,
            ),
            metadata=TicketMetadata(
                description=f"NFT Ticket for {event_name or DEFAULTS['description_fallback']}",
                image="",
                attributes=[
                    TicketAttribute(trait_type="Event Type", value=DEFAULTS["event_type"]),
                    TicketAttribute(
                        trait_type="Date",
                        value=event_date or DEFAULTS["date_attribute_fallback"],
                    ),
                ],
            ),
            status=DEFAULTS["status"],
            created_at=format_timestamp(self.clock()),
        )
        logger.info(
            f"Ticket prepared for '{ticket.event_details.name}' on {ticket.event_details.date}"
        )
        return ticket

    def summarize(self, ticket: NftTicket) -> str:
        """Human-readable summary embedding the ticket fields."""
        return SUMMARY_TEMPLATE.format(
            name=ticket.event_details.name,
            date=ticket.event_details.date,
            price=ticket.contract_details.ticket_price,
            currency=self.settings.ticket_currency,
            max_supply=ticket.contract_details.max_supply,
        )
