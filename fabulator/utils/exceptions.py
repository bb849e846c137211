"""Exceptions raised by the fabulator parsers and context."""


class ParseError(Exception):
    """Exception raised when a fabric or design file cannot be parsed."""

    pass


class InvalidLocationError(ParseError):
    """Exception raised for a tile location that is not of the form ``X<int>Y<int>``."""

    pass


class MissingNetError(ParseError):
    """Exception raised for a routing entry that appears before any net declaration."""

    pass


class FileTypeError(Exception):
    """Exception raised for unsupported file types."""

    pass


__all__ = ["FileTypeError", "InvalidLocationError", "MissingNetError", "ParseError"]
