"""
Local library modules shared across the Sales Order UI.

Modules:
    logs: Logging utilities
    objects: Object hashing and serialization
    signals: Observer callbacks for snapshot change notifications
"""

from order_ui.lib import logs, objects, signals

__all__ = ["logs", "objects", "signals"]
