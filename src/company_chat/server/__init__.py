from . import core, plugins

__all__ = ("core", "plugins")
