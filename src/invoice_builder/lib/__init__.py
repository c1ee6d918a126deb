"""
Local library modules shared across the invoice builder.

Modules:
    logs: Logging utilities
    objects: JSON serialization
"""

from invoice_builder.lib import logs, objects

__all__ = ["logs", "objects"]
