"""
Application wiring: lifespan, CORS and middlewares.
"""

from ronda_api.core.cors import configure_cors
from ronda_api.core.lifespan import lifespan
from ronda_api.core.middlewares import register_middlewares

__all__ = ["configure_cors", "lifespan", "register_middlewares"]
