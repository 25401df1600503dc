"""Domain Layer - entities and collaborator ports."""

from . import entities, ports

__all__ = ["entities", "ports"]
