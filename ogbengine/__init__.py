"""A small 2D game engine core: PCM audio formats, WAV reading, quad drawing and a map scene."""

__version__ = "0.1.0"