"""
probedash exceptions
"""


class ProbedashError(Exception):
    """Base exception for all probedash errors"""

    pass


class UnconfiguredSourceError(ProbedashError):
    """Raised when a snapshot arrives for a data source that has no tab"""

    def __init__(self, kind: str):
        super().__init__(f"no {kind} source is configured")
        self.kind = kind


class SnapshotFormatError(ProbedashError):
    """Raised when a probe payload cannot be turned into snapshot records"""

    pass


class ProbeError(ProbedashError):
    """Raised when a probe request fails"""

    def __init__(self, source: str, message: str, status_code: int | None = None):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.status_code = status_code


class ConfigError(ProbedashError):
    """Raised when the dashboard configuration is unreadable or invalid"""

    pass
