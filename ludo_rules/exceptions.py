# Rules errors: contract violations detected by the pure engine
class RulesError(Exception):
    """Base exception for rules-engine errors."""

    pass


class InvalidDieValue(RulesError, ValueError):
    """Raised when a die value falls outside 1..6."""

    pass


class IllegalMoveError(RulesError):
    """Raised when a target is not among the legal moves for a token and die."""

    pass


class GameOverError(RulesError):
    """Raised on any mutation once a winner has been recorded."""

    pass


class UnknownTokenError(RulesError):
    """Raised when a token is not part of the roster it is played against."""

    pass


class InvalidTokenState(RulesError, ValueError):
    """Raised when a token's position and flags disagree."""

    pass


class InvalidTurnIndex(RulesError, ValueError):
    """Raised when the turn index or player count is out of range."""

    pass


# Session errors: caller-side checks around the engine
class SessionError(Exception):
    """Base exception for match/session errors."""

    pass


class TurnOwnershipError(SessionError):
    """Raised when a player acts outside their turn or on another player's token."""

    pass


class DieNotRolledError(SessionError):
    """Raised when a move is attempted before rolling."""

    pass


class DieAlreadyRolledError(SessionError):
    """Raised when rolling again before the pending roll is used."""

    pass


class RoomFullError(SessionError):
    """Raised when every colour in a room is already taken."""

    pass


class InvalidPlayerCount(SessionError, ValueError):
    """Raised when a game is started with too few or too many players."""

    pass


class RoomNotFoundError(SessionError, KeyError):
    """Raised when a room id is not present in the store."""

    pass
