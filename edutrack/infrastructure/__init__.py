# ==============================================================================
# Infrastructure Adapters
# ==============================================================================
"""
Adapters for external services (ports-and-adapters architecture).

This module contains concrete implementations of the base/ interfaces:
- api.py - LearningApiClient (HTTP EventStore and ContentSource)
- cache/ - Cache adapters (Valkey/Redis)
"""

from edutrack.infrastructure.api import LearningApiClient
from edutrack.infrastructure.cache import ValkeyCache, check_valkey_connection

__all__ = [
    "LearningApiClient",
    "ValkeyCache",
    "check_valkey_connection",
]
