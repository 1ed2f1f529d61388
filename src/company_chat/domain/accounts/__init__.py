"""User Account domain logic."""

from . import controllers, deps, guards, schemas, services, urls

__all__ = ("controllers", "deps", "guards", "schemas", "services", "urls")
