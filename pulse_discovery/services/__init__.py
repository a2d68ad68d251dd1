"""
Service layer for the Pulse Discovery engine.

Configuration loading and the discovery facade used by the presentation
layer.
"""

from .config_manager import ConfigurationManager
from .discovery_service import DiscoveryService

__all__ = [
    "ConfigurationManager",
    "DiscoveryService",
]
