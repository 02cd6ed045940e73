from typing import List, Optional


class VolleyScoutError(Exception):
    pass


class IncompleteCaptureError(VolleyScoutError):
    """Outcome requested without an acting player/action context."""


class RosterValidationError(VolleyScoutError, ValueError):

    def __init__(self, problems: List[str]):
        self.problems = list(problems)
        super().__init__("; ".join(self.problems))


class PersistenceError(VolleyScoutError):

    def __init__(self, message: str, path: Optional[str] = None):
        self.path = path
        super().__init__(message if path is None else f"{message}: {path}")


class InvalidSnapshotError(PersistenceError):
    pass
