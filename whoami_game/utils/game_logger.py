"""
Game Logger Module for the Who Am I? Server

This module provides structured logging for player actions, game events
and errors. Entries are JSON encoded so a day's log can be parsed line by line.
"""

import logging
import json
import os
from datetime import datetime
from typing import Any, Dict, Optional
from pathlib import Path


class GameLogger:
    """
    Centralized logging system for the game server.

    Features:
    - Player action tracking keyed by connection handle
    - Game event logging (phase changes, turns, aborts)
    - Error logging with exception type and message
    - JSON structured logs for easy parsing
    """

    def __init__(self, log_dir: str = "logs", level: str = "INFO"):
        self.log_dir = Path(log_dir)
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.level = getattr(logging, str(level).upper(), logging.INFO)

        self.logger = self._setup_logger()

    def _setup_logger(self) -> logging.Logger:
        """Attach a dated file handler and a console handler for warnings."""
        logger = logging.getLogger('whoami_game')
        logger.setLevel(self.level)
        logger.propagate = False

        # Re-creating the logger (tests, reloads) must not stack handlers
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()

        log_file = self.log_dir / f"whoami_{datetime.now():%Y-%m-%d}.log"
        handlers = (
            (logging.FileHandler(log_file, encoding='utf-8'), self.level,
             '%(asctime)s | %(levelname)s | %(message)s'),
            (logging.StreamHandler(), logging.WARNING, '%(levelname)s: %(message)s'),
        )
        for handler, level, fmt in handlers:
            handler.setLevel(level)
            handler.setFormatter(logging.Formatter(fmt, datefmt='%Y-%m-%d %H:%M:%S'))
            logger.addHandler(handler)
        return logger

    def _create_log_entry(self,
                          event_type: str,
                          action: str,
                          player_id: Optional[str],
                          details: Dict[str, Any]) -> str:
        """One JSON line per entry."""
        entry = {
            'timestamp': datetime.now().isoformat(),
            'event_type': event_type,
            'action': action,
            'player': player_id,
            'details': details
        }
        return json.dumps(entry, ensure_ascii=False, default=str)

    def log_player_action(self,
                          player_id: str,
                          action: str,
                          room_id: Optional[str] = None,
                          **kwargs):
        """
        Log an inbound player action.

        Args:
            player_id: Connection handle of the acting player
            action: Inbound event name (e.g. 'createRoom', 'makeGuess')
            room_id: Room identifier if applicable
            **kwargs: Additional details to log
        """
        details = {'room_id': room_id, **kwargs}
        self.logger.info(self._create_log_entry('PLAYER_ACTION', action, player_id, details))

    def log_game_event(self,
                       room_id: Optional[str],
                       event: str,
                       player_id: Optional[str] = None,
                       **kwargs):
        """
        Log room state changes (phase transitions, turns, aborts).

        Args:
            room_id: Room identifier
            event: Type of game event (e.g. 'picking_started', 'round_finished')
            player_id: Player the event concerns, if any
            **kwargs: Additional game details
        """
        details = {'room_id': room_id, **kwargs}
        self.logger.info(self._create_log_entry('GAME_EVENT', event, player_id, details))

    def log_rejected_action(self,
                            player_id: Optional[str],
                            action: str,
                            reason: str,
                            room_id: Optional[str] = None):
        """Log an action that was refused without touching room state."""
        details = {'room_id': room_id, 'reason': reason}
        self.logger.info(self._create_log_entry('REJECTED_ACTION', action, player_id, details))

    def log_error(self,
                  error: Exception,
                  action: str,
                  room_id: Optional[str] = None,
                  player_id: Optional[str] = None):
        """
        Log errors with full context.

        Args:
            error: Exception that occurred
            action: Action that was being performed
            room_id: Room identifier if applicable
            player_id: Connection handle if applicable
        """
        details = {
            'room_id': room_id,
            'error_type': type(error).__name__,
            'error_message': str(error),
        }
        self.logger.error(self._create_log_entry('ERROR', action, player_id, details))


# Global logger instance
game_logger = GameLogger(os.getenv('LOG_DIR', 'logs'), os.getenv('LOG_LEVEL', 'INFO'))
