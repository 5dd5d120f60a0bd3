"""Exceptions raised by the borrowing engines."""


class MaxBorrowError(Exception):
    """Base exception for the calculation engines"""

    pass


class InvalidInputError(MaxBorrowError, ValueError):
    """A price, savings or loan amount is outside its valid range"""

    pass
