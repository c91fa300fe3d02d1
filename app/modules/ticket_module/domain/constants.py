"""Constants for the ticket module."""

# Placeholders used when a field was never collected
UNKNOWN_EVENT = "Unknown Event"
UNKNOWN_DATE = "Unknown Date"

DEFAULTS = {
    "type": "nft_ticket",
    "status": "ready_to_deploy",
    "event_type": "General Admission",
    "description_fallback": "Event",
    "date_attribute_fallback": "TBD",
}

SUMMARY_TEMPLATE = (
    "🎫 Perfect! I've prepared your NFT ticketing contract. Here are the details:\n\n"
    "**Event:** {name}\n"
    "**Date:** {date}\n"
    "**Ticket Price:** {price} {currency}\n"
    "**Max Supply:** {max_supply} tickets\n\n"
    "You can now deploy this NFT ticketing contract to the Massa blockchain! "
    "The contract will allow users to mint tickets as NFTs for your event."
)
