"""Top-level package for the barstream streaming indicator engine.

Subpackages follow the flow of a bar through the engine: ``num`` provides the
numeric representation, ``market`` the bar model and window buffers,
``indicators`` the bar-by-bar computations and their contexts, and
``analysis`` the time-indexed valuation of positions. ``config`` and
``telemetry`` carry configuration and logging for all of them.
"""

__version__ = "0.4.0"

__all__: list[str] = ["__version__"]
