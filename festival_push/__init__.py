"""Push notification relay for the Festival Rumour chat app."""

__version__ = "0.1.0"
