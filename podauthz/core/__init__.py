"""
Core package wiring PodAuthz components into an authorization engine.
"""

from .config import EngineConfig
from .engine import AuthorizationEngine

__all__ = [
    'EngineConfig',
    'AuthorizationEngine',
]
