"""Services layer for MANAS360 session logic."""

from .session_registry import SessionRegistry
from .session_manager import SessionManager
from .lifecycle import LifecycleController
from .yield_calculator import YieldCalculator, YieldReport

__all__ = [
    "SessionRegistry",
    "SessionManager",
    "LifecycleController",
    "YieldCalculator",
    "YieldReport",
]
