from .usage import UsageController

__all__ = ("UsageController",)
