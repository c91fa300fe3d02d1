"""Constants for the conversation agent."""

import re

# Input that asks to create an event or ticket skips the introduction
INTENT_PATTERN = re.compile(r"create|event|ticket|nft|deploy|contract")

EXTRACTION_MARKER = "EXTRACTION_COMPLETE:"
FIELD_SEPARATOR = "|"
MISSING_FIELD = "Missing"

DATE_FORMAT = "%d/%m/%Y"
DATE_PATTERN = re.compile(r"^\d{2}/\d{2}/\d{4}$")

# Legacy wire marker for a JSON payload embedded in a message
EMBEDDED_PAYLOAD_PATTERN = re.compile(r"\[OBJ\](.*?)\[/OBJ\]", re.DOTALL)

MESSAGES = {
    "loading": "Processing your request...",
    "fallback": "I apologize, but I encountered an error processing your request. Please try again.",
    "ticket_created": "Ticket created successfully!",
    "ticket_error": "Error creating ticket object",
    "timeout": "Request timed out.",
    "step_limit": "The conversation could not be completed. Please try again.",
    "server_error": "An error occurred on the server.",
    "incomplete_extraction": (
        "I couldn't quite capture both details. Could you tell me the event name "
        "and the event date in DD/MM/YYYY format?"
    ),
    "invalid_date": (
        "Thanks! Could you confirm the event date in DD/MM/YYYY format, "
        "for example 25/12/2025?"
    ),
}
