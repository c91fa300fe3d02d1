"""Ticket domain models."""

from typing import List

from pydantic import BaseModel, ConfigDict, Field


class EventDetails(BaseModel):
    """Event the ticket grants access to."""

    name: str = Field(..., description="Event name")
    date: str = Field(..., description="Event date as given by the user")


class ContractDetails(BaseModel):
    """Parameters of the ticketing contract to deploy."""

    model_config = ConfigDict(populate_by_name=True)

    ticket_price: str = Field(..., alias="ticketPrice", description="Ticket price")
    max_supply: str = Field(..., alias="maxSupply", description="Max tickets")
    transferable: bool = Field(default=True, description="Tickets can be transferred")
    refundable: bool = Field(default=False, description="Tickets can be refunded")


class TicketAttribute(BaseModel):
    """NFT metadata attribute."""

    trait_type: str
    value: str


class TicketMetadata(BaseModel):
    """NFT metadata shown by wallets and marketplaces."""

    description: str = Field(..., description="Ticket description")
    image: str = Field(default="", description="Image URL, filled in later")
    attributes: List[TicketAttribute] = Field(default_factory=list)


class NftTicket(BaseModel):
    """Ticket-issuance request handed to the client for deployment."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    type: str = Field(default="nft_ticket")
    event_details: EventDetails = Field(..., alias="eventDetails")
    contract_details: ContractDetails = Field(..., alias="contractDetails")
    metadata: TicketMetadata
    status: str = Field(default="ready_to_deploy")
    created_at: str = Field(..., alias="createdAt", description="ISO-8601 UTC timestamp")

    def to_record(self) -> dict:
        """Wire representation with camelCase keys."""
        return self.model_dump(by_alias=True)
