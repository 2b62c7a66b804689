"""Errors raised by the session lifecycle and the analysis pipeline."""

from uuid import UUID


class ColorProfileError(Exception):
    """Base error carrying a machine-readable code and an HTTP status."""

    code = "INTERNAL_ERROR"
    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class SessionNotFoundError(ColorProfileError):
    """Raised when a session id does not resolve to a stored session."""

    code = "SESSION_NOT_FOUND"
    status_code = 404

    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"Session {session_id} not found.")
        self.session_id = session_id


class SessionExpiredError(ColorProfileError):
    """Raised when an operation targets a session past its expiry."""

    code = "SESSION_EXPIRED"
    status_code = 410

    def __init__(self, session_id: UUID) -> None:
        super().__init__(f"Session {session_id} has expired.")
        self.session_id = session_id


class InvalidSessionStateError(ColorProfileError):
    """Raised when the current status does not allow the requested transition."""

    code = "INVALID_SESSION_STATE"
    status_code = 409

    def __init__(self, session_id: UUID, current_status: str) -> None:
        super().__init__(f"Session {session_id} status is {current_status}.")
        self.session_id = session_id
        self.current_status = current_status


class SessionDataIncompleteError(ColorProfileError):
    """Raised when a session reaches analysis without its stored inputs."""

    code = "SESSION_DATA_INCOMPLETE"
    status_code = 500

    def __init__(self, session_id: UUID, missing: list[str]) -> None:
        joined = ", ".join(missing)
        super().__init__(f"Session {session_id} is missing: {joined}.")
        self.session_id = session_id
        self.missing = missing


class AnalysisNotFoundError(ColorProfileError):
    """Raised when an analysis id does not resolve to a stored analysis."""

    code = "ANALYSIS_NOT_FOUND"
    status_code = 404

    def __init__(self, analysis_id: UUID) -> None:
        super().__init__(f"Analysis {analysis_id} not found.")
        self.analysis_id = analysis_id


class AnalysisPipelineError(ColorProfileError):
    """Raised when a pipeline run fails after the session entered analysis."""

    code = "ANALYSIS_START_FAILED"
    status_code = 500

    def __init__(self, session_id: UUID, message: str) -> None:
        super().__init__(message)
        self.session_id = session_id
