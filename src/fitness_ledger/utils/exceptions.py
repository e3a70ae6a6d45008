"""Custom exceptions for the fitness ledger."""


class FitnessLedgerError(Exception):
    """Base exception for all fitness ledger errors."""

    pass


class ConfigurationError(FitnessLedgerError):
    """Raised when there is a configuration error."""

    pass


class InvalidFormatError(FitnessLedgerError):
    """Raised when an imported document cannot be parsed or validated."""

    pass


class InvalidInputError(FitnessLedgerError):
    """Raised when a store operation receives an invalid date or number."""

    pass


class PersistenceUnavailableError(FitnessLedgerError):
    """Raised when durable storage cannot be read or written."""

    pass


class ReportError(FitnessLedgerError):
    """Raised when writing a report fails."""

    pass
