"""Prediction-market order books, pricing, helpers and a WebSocket price fan-out server."""

__version__ = "0.1.0"