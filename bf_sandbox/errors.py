"""Errors raised while resolving or running a Brainfuck program."""


class BrainfuckError(Exception):
    """Base class for every failure of a single evaluation."""


class BracketError(BrainfuckError, SyntaxError):
    """The program has a bracket without a partner."""

    symbol = '?'

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Unmatched '{self.symbol}' at position {position}")


class UnmatchedOpenBracketError(BracketError):
    symbol = '['


class UnmatchedCloseBracketError(BracketError):
    symbol = ']'


class ResourceLimitExceeded(BrainfuckError, RuntimeError):
    """A run went past one of its configured limits."""

    def __init__(self, limit: int, message: str):
        self.limit = limit
        super().__init__(message)


class StepLimitExceeded(ResourceLimitExceeded):
    def __init__(self, limit: int):
        super().__init__(limit, f"Exceeded maximum step limit of {limit}")


class OutputLimitExceeded(ResourceLimitExceeded):
    def __init__(self, limit: int):
        super().__init__(limit, f"Exceeded maximum output limit of {limit} bytes")
