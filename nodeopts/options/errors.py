"""Exception types raised by option managers."""


class UnknownOptionError(ValueError):
    """Raised when a name matches no registered option descriptor."""

    def __init__(self, name: str):
        super().__init__(f"The option '{name.lower()}' does not exist.")
        self.name = name.lower()


class OptionValidationError(ValueError):
    """Raised when a candidate value is rejected by an option's validation rule."""

    def __init__(self, name: str, reason: str):
        super().__init__(f"Option '{name}': {reason}")
        self.name = name
        self.reason = reason


class OptionScopeError(RuntimeError):
    """Raised when a manager is asked to write or delete a scope it does not own."""
