"""A WebSocket server and game logic for two-player Ludo games."""

__version__ = "0.1.0"