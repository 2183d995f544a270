"""
luxstream: real-time E1.31 lighting streamer

Renders static colors and candle flicker effects into per-universe
frame buffers and streams them to lighting controllers over sACN at a
fixed frame rate.
"""

__version__ = "0.1.0"

from luxstream.core.config import Settings

__all__ = [
    "Settings",
    "__version__",
]
