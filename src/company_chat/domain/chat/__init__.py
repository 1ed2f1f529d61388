"""Chat domain logic."""

from . import controllers, deps, middlewares, pipeline, quota, schemas, services, urls

__all__ = ("controllers", "deps", "middlewares", "pipeline", "quota", "schemas", "services", "urls")
