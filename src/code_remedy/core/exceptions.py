class RemedyError(Exception):
    """Base class for code-remedy exceptions."""
    pass

class ConfigurationError(RemedyError):
    """Exception for configuration errors, such as a missing API key."""
    pass

class RemediationFailure(RemedyError):
    """The upstream model call failed. Network, auth and provider errors all end up here."""
    pass

# Name used by the HTTP layer and the docs for the same failure.
UpstreamCallFailure = RemediationFailure

class RequestValidationError(RemedyError):
    """A remediation payload did not have the {code, error, language} shape."""
    pass

class NoErrorToFix(RemedyError):
    """Custom exception raised when the editor holds no error message."""
    def __init__(self, message=None):
        self.message = message or "There is no error to fix. Run the code first or pass --error."
        super().__init__(self.message)

class InvalidTransition(RemedyError):
    """Exception for an illegal dialog state transition."""
    def __init__(self, current, target):
        self.current = current
        self.target = target
        super().__init__(f"Cannot move dialog from {current.name} to {target.name}")

class FileServiceError(RemedyError):
    """Exception for file service errors."""
    pass
