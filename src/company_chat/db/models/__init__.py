from .usage_record import UsageRecord
from .user import User
from .user_group import BUILTIN_USER_GROUP_ADMIN, BUILTIN_USER_GROUP_DEFAULT, BUILTIN_USER_GROUP_IDS, UserGroup
from .user_group_membership import UserGroupMembership

__all__ = (
    "BUILTIN_USER_GROUP_ADMIN",
    "BUILTIN_USER_GROUP_DEFAULT",
    "BUILTIN_USER_GROUP_IDS",
    "UsageRecord",
    "User",
    "UserGroup",
    "UserGroupMembership",
)
