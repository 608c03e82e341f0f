"""Domain-level exceptions for the MVP builder."""


class ProviderError(Exception):
    """Raised when a provider fails (network, auth, timeout, etc.)."""

    pass


class StreamError(Exception):
    """Raised when the transport reports an error frame mid-stream."""

    pass


class GenerationInProgressError(Exception):
    """Raised when a generation is started while another is still streaming."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            f"Session '{session_id}' is already streaming a generation"
        )


class NoActiveGenerationError(Exception):
    """Raised when deltas are fed to a session that is not streaming."""

    def __init__(self, session_id: str):
        self.session_id = session_id
        super().__init__(
            f"Session '{session_id}' has no generation in progress"
        )
