class DartAnalyzerError(Exception):
    """Exception raised when there is an error talking to the Dart analyzer."""
    def __init__(self, message: str):
        self.message = message
        super().__init__(self.message)


class DartVSConfigError(DartAnalyzerError):
    """Raised when a configuration file or override is invalid."""


class QuickInfoSourceClosedError(DartAnalyzerError):
    """Raised when a hover is triggered on a source that has been closed."""


class RegistrationError(DartAnalyzerError):
    """Raised on duplicate or unknown extension registrations."""
