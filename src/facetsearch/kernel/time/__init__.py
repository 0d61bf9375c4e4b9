"""Kernel time – Clock port."""
from facetsearch.kernel.time.clock import Clock, FrozenClock, SystemClock, elapsed_ms

__all__ = ["Clock", "FrozenClock", "SystemClock", "elapsed_ms"]
