"""Terminal WebSocket chat client: protocol, event bus, connection service and chat views."""

__version__ = "0.1.0"
__all__ = ["__version__"]