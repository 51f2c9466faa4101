"""
Helper Functions

Contains utility functions used throughout the application.
"""

from typing import Any, Optional


def extract_room_id(data) -> Optional[str]:
    """Room id from an event payload; bare strings are accepted as the id itself."""
    if isinstance(data, str):
        return data
    if isinstance(data, dict):
        room_id = data.get('roomId')
        return room_id if isinstance(room_id, str) else None
    return None


def payload_value(data, key: str, default: Any = None) -> Any:
    if isinstance(data, dict):
        return data.get(key, default)
    return default
