"""Exception types raised by tailtracer."""


class TailtracerError(Exception):
    """Base class for all tailtracer errors."""

    pass


class ConfigError(TailtracerError):
    """Raised when receiver configuration is missing or invalid."""

    pass


class CatalogError(TailtracerError):
    """Raised when a catalog definition cannot be loaded."""

    pass


class UnrecognizedCodeError(TailtracerError):
    """Raised in strict mode when a provider, OS or endpoint code has no mapping."""

    def __init__(self, kind: str, code: str):
        super().__init__(f"Unrecognized {kind} code: {code!r}")
        self.kind = kind
        self.code = code
