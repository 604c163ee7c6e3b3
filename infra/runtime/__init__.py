from .system_clock import SystemClock
from .structured_logger import StructuredLogger

__all__ = ["SystemClock", "StructuredLogger"]
