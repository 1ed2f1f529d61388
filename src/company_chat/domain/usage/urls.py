"""URL constants for usage domain."""

USAGE_BASE = "/api/usage"

USAGE_ME = f"{USAGE_BASE}/me"
USAGE_USER = f"{USAGE_BASE}/users/{{user_id:uuid}}"
USAGE_USER_GROUP = f"{USAGE_BASE}/user-groups/{{user_group_id:uuid}}"
