class SnookerError(Exception):
    pass


class InvalidRedCountError(SnookerError, ValueError):
    pass


class InvalidMoveError(SnookerError, ValueError):
    pass


class MatchNotFinishedError(SnookerError):
    pass


class FrameFileError(SnookerError):
    pass


class PersistenceError(SnookerError):
    pass
