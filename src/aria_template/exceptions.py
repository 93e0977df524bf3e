"""Custom exceptions for aria-template."""


class AriaTemplateError(Exception):
    """Base exception for aria-template."""

    pass


class ParseError(AriaTemplateError):
    """Malformed template text."""

    def __init__(self, message: str, line: int, column: int):
        self.message = message
        self.line = line
        self.column = column
        super().__init__(f"{message} (line {line}, column {column})")


class ContractViolationError(AriaTemplateError):
    """The accessible tree handed to the core is malformed."""

    def __init__(self, message: str, path: tuple[tuple[str, int], ...] = ()):
        self.message = message
        self.path = path

        if path:
            location = " > ".join(f"{role}[{index}]" for role, index in path)
            super().__init__(f"{message} (at {location})")
        else:
            super().__init__(message)
