"""
Core Layer - Contracts, configuration and dispatch.

This package contains:
- Normalized request/response types (types.py)
- Configuration management (settings.py)
- Prompt placeholder rendering (prompt_template.py)
- Dispatcher and error-string boundary (dispatcher.py)
"""

__all__ = []
