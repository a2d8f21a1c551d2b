"""
Utility modules for the consistency probe.

Provides:
- Structured logging configuration
"""

from consistency_probe.utils.logging import ProbeLogger, configure_logging

__all__ = [
    "ProbeLogger",
    "configure_logging",
]
