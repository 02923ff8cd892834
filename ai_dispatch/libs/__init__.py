"""
Libs Layer - Pluggable abstraction layer.

This package contains the registry-based implementations for
pluggable components:
- Provider adapters (llm)
- Transport strategies (transport)
"""

__all__ = []
