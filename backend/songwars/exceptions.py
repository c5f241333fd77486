"""
Game errors.

Every error here is recoverable: it is reported to the connection that
triggered it and never touches other rooms.
"""


class SongWarsError(Exception):
    """Base class for all game errors."""
    code = 'error'
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


# ============ Categories ============

class Unauthorized(SongWarsError):
    code = 'unauthorized'
    default_message = 'Not authorized'


class NotFound(SongWarsError):
    code = 'not_found'
    default_message = 'Not found'


class Conflict(SongWarsError):
    code = 'conflict'
    default_message = 'Conflict'


class InvalidState(SongWarsError):
    code = 'invalid_state'
    default_message = 'Action not allowed right now'


class Forbidden(SongWarsError):
    code = 'forbidden'
    default_message = 'Forbidden'


class InvalidPayload(SongWarsError):
    code = 'invalid_payload'
    default_message = 'Invalid payload'


# ============ Rooms ============

class RoomNotFound(NotFound):
    default_message = 'Room not found'


class RoomFull(Conflict):
    default_message = 'Room is full'


class NameTaken(Conflict):
    default_message = 'Name already taken'


class GameAlreadyStarted(Conflict):
    default_message = 'Game already in progress'


class AlreadyInRoom(Conflict):
    default_message = 'Already in a room'


class NotEnoughPlayers(Conflict):
    default_message = 'Need at least 2 players to start'


class NotInRoom(InvalidState):
    default_message = 'Not in any room'


class NotHost(Unauthorized):
    pass


# ============ Battles ============

class NoActiveBattle(InvalidState):
    default_message = 'No active battle'


class SubmissionsClosed(InvalidState):
    default_message = 'Submissions are closed for this battle'


class VotingNotActive(InvalidState):
    default_message = 'Voting not active'


class GameFinished(InvalidState):
    default_message = 'Game is already finished'


class BattlerCannotVote(Forbidden):
    default_message = 'Battlers cannot vote'


class NotABattler(Forbidden, Unauthorized):
    default_message = 'You are not battling in this round'
