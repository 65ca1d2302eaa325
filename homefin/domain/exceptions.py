"""Domain-specific exceptions"""

from typing import List


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ExchangeRateFetchError(DomainException):
    """Forex API returned an error, timed out, or had no USD rate"""

    pass


class RecordNotFoundError(DomainException):
    """Requested record does not exist for this user"""

    pass


class InvalidRentDataError(DomainException):
    """Rent details failed validation and cannot be saved"""

    def __init__(self, errors: List[str]):
        super().__init__("; ".join(errors))
        self.errors = errors
