"""Market data model and window buffers.

Bars arrive from an external feed; this package only defines their shape and
the fixed-capacity buffers that indicators keep over them.
"""

from .models import Bar
from .windows import CircularWindow, MonotonicExtremumWindow

__all__ = ["Bar", "CircularWindow", "MonotonicExtremumWindow"]
