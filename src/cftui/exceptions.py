"""Custom exceptions for the cf-tui application."""


class CFError(Exception):
    """Base exception for all cf-tui errors."""

    def __init__(self, message: str = "An error occurred with cf-tui") -> None:
        self.message = message
        super().__init__(self.message)


class ConfigError(CFError):
    """Raised when the configuration file can't be read or parsed."""

    def __init__(self, message: str = "Failed to read configuration file") -> None:
        super().__init__(message)


class NoConfigItemError(CFError):
    """Raised when an action needs a setting that isn't configured."""

    def __init__(self, item: str) -> None:
        super().__init__(
            f"{item} not configured.\n"
            f"Please configure {item} in your configuration file."
        )
        self.item = item


class NoAuthorizationError(CFError):
    """Raised when a signed API request lacks the key or the secret."""

    def __init__(self, missing: str) -> None:
        super().__init__(
            f"Authorization failed due to {missing} missing. "
            f"Please configure {missing} in configuration file."
        )
        self.missing = missing


class ApiError(CFError):
    """Raised when a Codeforces API request fails."""

    def __init__(self, message: str = "Codeforces API request failed") -> None:
        super().__init__(message)


class ScrapeError(CFError):
    """Raised when sample tests can't be scraped from a problem page."""

    def __init__(self, message: str = "Failed to parse test cases") -> None:
        super().__init__(message)


class NoScriptError(CFError):
    """Raised when no commands are configured for a source file extension."""

    def __init__(self, extension: str) -> None:
        super().__init__(
            f"No commands configured for '.{extension}' files.\n"
            "Please configure commands in your configuration file."
        )
        self.extension = extension


class SourceNotFoundError(CFError):
    """Raised when a problem directory has no solution file."""

    def __init__(self, directory: str) -> None:
        super().__init__(
            f"Cannot find any code in {directory}.\nMaybe you should generate it first?"
        )
        self.directory = directory


class TestCasesNotFoundError(CFError):
    """Raised when a problem directory has no parsed test cases."""

    __test__ = False

    def __init__(self, directory: str) -> None:
        super().__init__(
            f"Cannot find any test cases in {directory}.\nMaybe you should parse tests first?"
        )
        self.directory = directory


class CommandError(CFError):
    """Raised when a before or after command fails."""

    def __init__(self, stage: str, detail: str) -> None:
        super().__init__(f"{stage} command failed: {detail}")
        self.stage = stage
        self.detail = detail


class InvalidSelectionError(CFError):
    """Raised when a selected row doesn't exist in the current data."""

    def __init__(self, index: int) -> None:
        super().__init__(
            f"No such index: {index}.\nCommonly this is a problem of the application."
        )
        self.index = index


class InteractiveProblemError(CFError):
    """Raised when trying to parse tests of an interactive problem."""

    def __init__(self, index: str) -> None:
        super().__init__(
            f"Problem {index} is interactive. The traditional way of testing does not work."
        )
        self.index = index
