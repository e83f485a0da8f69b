from . import constants


class ComponentResolverError(Exception):
    """Base exception for all application-specific errors."""

    pass


# --- 1. Errors related to building the resolver options ---
class ConfigurationError(ComponentResolverError):
    """Base class for errors encountered while finding, reading, or validating options."""

    pass


class ConfigFileMissingError(ConfigurationError):
    """Raised when an options file cannot be found."""

    pass


class ConfigParsingError(ConfigurationError):
    """Raised when a YAML options file is syntactically incorrect."""

    pass


class ConfigValidationError(ConfigurationError):
    """Raised when the options fail structural validation (e.g., Pydantic or a missing root directory)."""

    pass


# --- 2. Errors raised while resolving components ---
class ResolutionError(ComponentResolverError):
    """Base class for errors raised by a resolver query."""

    pass


class PatternParseError(ResolutionError):
    """Raised when a pattern.json file cannot be decoded."""

    def __init__(self, filepath: str, cause: Exception):
        self.filepath = filepath
        self.cause = cause
        super().__init__(f'Failed to parse "{filepath}" {type(cause).__name__}: {cause}')


class ComponentNotFoundError(ResolutionError):
    """Raised when a component path is not part of the current snapshot."""

    def __init__(self, component_path: str):
        self.component_path = component_path
        super().__init__(f'Could not resolve component "{component_path}"')


# --- 3. Errors for optional features which are switched off ---
class FeatureDisabledError(ComponentResolverError):
    """Base class for queries against a deactivated feature."""

    feature: str = ""
    default_message: str = ""

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)


class ExamplesDisabledError(FeatureDisabledError):
    """Raised when examples are queried while `examples` is off."""

    feature = "examples"
    default_message = constants.EXAMPLES_DISABLED_MESSAGE


class ReadmesDisabledError(FeatureDisabledError):
    """Raised when readmes are queried while `readme` is off."""

    feature = "readme"
    default_message = constants.READMES_DISABLED_MESSAGE


# --- 4. Errors related to IO operations ---
class ResolverIOError(ComponentResolverError):
    """Base class for IO-related errors."""

    pass


class InvalidPathError(ResolverIOError):
    """Raised when a path is invalid."""

    pass


class CRPathNotFoundError(ResolverIOError):
    """Raised when a file or directory is not found."""

    pass


class CRNotAFileError(ResolverIOError):
    """Raised when a file is expected, but a directory is found."""

    pass


class CRNotADirectoryError(ResolverIOError):
    """Raised when a directory is expected, but a file is found."""

    pass
