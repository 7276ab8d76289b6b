"""Pixoo rendering toolkit.

Draw pixel graphics for Divoom Pixoo panels and push them to the device:
- Canvas with drawing primitives, bitmap fonts and SVG path filling
- Multi-frame animations and PNG previews
- Async HTTP client for the device's control protocol
"""

__version__ = "1.0.0"
