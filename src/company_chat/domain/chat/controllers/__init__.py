from .chat import ChatController

__all__ = ("ChatController",)
