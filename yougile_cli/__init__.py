"""
YouGile CLI - Three-layer architecture for the YouGile REST API v2.

Layers:
- core: Raw types and HTTP client
- sdk: High-level YouGileClient with nice ergonomics
- cli: Opinionated command-line interface
"""

from yougile_cli.sdk import YouGileClient

__version__ = "0.1.0"
__all__ = ["YouGileClient"]
