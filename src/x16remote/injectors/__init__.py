"""Input injection backends for x16remote.

The scheduler delivers due events through a pluggable KeyInjector.

Public API:
    KeyInjector -- Abstract base class
    KeyInjectionError -- Raised when delivery fails
    LoggingInjector -- Logs events (headless hosts)
    RecordingInjector -- Records events (previews, tests)
    HidGadgetInjector -- Writes USB HID reports to a gadget device
"""

from x16remote.injectors.base import KeyInjectionError, KeyInjector
from x16remote.injectors.recording import LoggingInjector, RecordingInjector

__all__ = [
    "KeyInjector",
    "KeyInjectionError",
    "LoggingInjector",
    "RecordingInjector",
    "HidGadgetInjector",
    "create_injector",
]


def __getattr__(name: str) -> type:
    """Lazy import for the device-backed implementation."""
    if name == "HidGadgetInjector":
        from x16remote.injectors.hid_gadget import HidGadgetInjector
        return HidGadgetInjector
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


def create_injector(backend: str, hid_device: str = "/dev/hidg0") -> KeyInjector:
    """Build the injector named by ``backend`` ("log" or "hid").

    Raises:
        ValueError: If the backend name is unknown.
    """
    if backend == "log":
        return LoggingInjector()
    if backend == "hid":
        from x16remote.injectors.hid_gadget import HidGadgetInjector
        injector = HidGadgetInjector(device_path=hid_device)
        injector.open()
        return injector
    raise ValueError(f"Unknown injector backend: {backend!r}")
