"""
Environment variable management for Resin applications and devices.
"""

from .sdk import SDK


__all__ = ["SDK"]
