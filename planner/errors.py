class PlannerError(Exception):
    """Base exception for the planner client."""


class PersistenceError(PlannerError):
    """A persistence target could not be read."""

    def __init__(self, message: str, target: str | None = None):
        super().__init__(message)
        self.target = target


class AuthenticationError(PlannerError):
    """Login could not be started or completed."""

    def __init__(self, message: str, remediation: str | None = None):
        super().__init__(message)
        self.remediation = remediation

    def __str__(self) -> str:
        base = super().__str__()
        if self.remediation:
            return f"{base} {self.remediation}"
        return base
