"""
Ports implemented by storage and HTTP adapters.
"""

from .key_value_store import KeyValueStore
from .profile_directory import ProfileDirectory

__all__ = [
    "KeyValueStore",
    "ProfileDirectory",
]
