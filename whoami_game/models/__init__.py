"""
Data Models Package

Contains all data models used throughout the application.
"""

from .room import Player, Room, RoomPhase, WordEntry

__all__ = ['Player', 'Room', 'RoomPhase', 'WordEntry']
