"""Receipt scanning and aisle-route ordering for grocery shopping lists."""

__version__ = "0.1.0"
