"""Client for the x16remote control plane."""

from x16remote.client.http_client import RemoteKeyboard, RemoteKeyboardError

__all__ = ["RemoteKeyboard", "RemoteKeyboardError"]
