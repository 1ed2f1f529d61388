"""URL constants for chat domain."""

CHAT_BASE = "/api/chat"

CHAT_COMPLETE = f"{CHAT_BASE}"
