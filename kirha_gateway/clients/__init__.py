"""Clients for the remote Kirha tools API."""

from .base import KirhaToolClient
from .kirha import KirhaClient

__all__ = ["KirhaClient", "KirhaToolClient"]
