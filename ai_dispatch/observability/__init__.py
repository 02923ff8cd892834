"""
Observability Layer - Logging.

This package contains observability components:
- Human-readable logger
- JSON Lines formatter
- Settings-driven handler setup
"""

__all__ = []
