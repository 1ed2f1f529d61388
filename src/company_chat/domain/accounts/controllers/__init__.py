from .user_groups import UserGroupController
from .users import UserController

__all__ = ("UserController", "UserGroupController")
