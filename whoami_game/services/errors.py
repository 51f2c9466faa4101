"""
Game Errors

Every error a player action can raise. None of them is fatal to a room; the
websocket layer reports them to the acting connection only.
"""


class GameError(Exception):
    """Base class for errors reported back to the acting player."""
    default_message = "Action not allowed"

    def __init__(self, message: str = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class RoomNotFoundError(GameError):
    default_message = "Room does not exist."


class RoomFullError(GameError):
    default_message = "Room is full."


class GameInProgressError(GameError):
    default_message = "The game has already started."


class NotEnoughPlayersError(GameError):
    default_message = "At least 2 players are needed to start the game."


class InvalidActorError(GameError):
    """The acting connection does not hold the role the action needs."""
    default_message = "You are not allowed to do that right now."


class InvalidPayloadError(GameError):
    default_message = "Invalid request."


class RoomCapacityError(GameError):
    """No free room code could be generated."""
    default_message = "No free room is available, try again later."
