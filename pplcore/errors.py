"""Exception types for pplcore."""


class PPLError(Exception):
    """Base class for every error raised by pplcore."""


class LexError(PPLError):
    """Raised when the lexer meets a character it does not recognize."""

    def __init__(self, char: str, position: int, line: int = 1, column: int = 1):
        self.char = char
        self.position = position
        self.line = line
        self.column = column
        super().__init__(f"Unexpected character '{char}' at line {line}, column {column}")


class ParseError(PPLError):
    """
    Raised inside the parser on a malformed token sequence.

    Never escapes `parse()`, which turns it into an `Error` node.
    """

    def __init__(self, message: str, token=None):
        self.message = message
        self.token = token
        super().__init__(message)


class PPLRuntimeError(PPLError, RuntimeError):
    """Aborts the interpreter run in progress."""


class InferenceError(PPLError):
    """Raised when an inference run cannot produce a result."""
