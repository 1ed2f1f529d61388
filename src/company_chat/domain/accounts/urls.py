"""URL constants for accounts domain."""

ACCOUNT_PROFILE = "/api/me"

USER_LIST = "/api/users"
USER_CREATE = "/api/users"
USER_DETAIL = "/api/users/{user_id:uuid}"
USER_UPDATE = "/api/users/{user_id:uuid}"
USER_DELETE = "/api/users/{user_id:uuid}"

USER_GROUP_LIST = "/api/user-groups"
USER_GROUP_CREATE = "/api/user-groups"
USER_GROUP_DETAIL = "/api/user-groups/{user_group_id:uuid}"
USER_GROUP_UPDATE = "/api/user-groups/{user_group_id:uuid}"
USER_GROUP_DELETE = "/api/user-groups/{user_group_id:uuid}"
