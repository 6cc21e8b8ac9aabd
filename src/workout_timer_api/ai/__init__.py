"""Generative provider client management."""
from .client_factory import AIClientFactory, AIRequestContext

__all__ = [
    "AIClientFactory",
    "AIRequestContext",
]
