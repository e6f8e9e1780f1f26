"""Errors raised by the relay. Routes map the per-request ones to HTTP responses."""


class RelayError(Exception):
    """Base class for all relay errors."""


class ConfigError(RelayError):
    """Startup configuration is missing or malformed. Fatal: the server must not start."""


class UnknownIndustry(RelayError):
    def __init__(self, industry: str):
        super().__init__(f"Unknown industry: {industry!r}")
        self.industry = industry


class SessionNotFound(RelayError):
    def __init__(self, session_key: str):
        super().__init__(f"No chat started for {session_key!r}")
        self.session_key = session_key


class CompletionError(RelayError):
    """Anything that went wrong between sending the transcript and getting a usable reply."""


class MalformedCompletion(CompletionError):
    """The model answered, but not with the JSON object we asked for."""


class CompletionProviderFailure(CompletionError):
    """Network or provider-side error from the completion API."""


class CompletionTimeout(CompletionError):
    def __init__(self, timeout_seconds: float):
        super().__init__(f"Completion API did not answer within {timeout_seconds:g}s")
        self.timeout_seconds = timeout_seconds
