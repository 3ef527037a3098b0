"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class TransactionImportError(DomainException):
    """Raw transaction text could not be imported"""

    reason = "import_failed"


class MalformedInputError(TransactionImportError):
    """Input is empty or has no data rows after the header"""

    reason = "malformed_input"


class MissingRequiredColumnsError(TransactionImportError):
    """Header row lacks a date or amount column"""

    reason = "missing_required_columns"


class NoValidRowsError(TransactionImportError):
    """File was readable but every data row was rejected"""

    reason = "no_valid_rows"


class InvalidTransactionDataError(DomainException):
    """Transaction data is malformed or violates an invariant"""

    pass


class RemoteAnalysisError(DomainException):
    """Remote model is unavailable, timed out or returned an unusable payload"""

    def __init__(self, message: str, reason: str = "error"):
        super().__init__(message)
        self.reason = reason  # missing_credential | timeout | http_error | malformed


class NotFoundError(DomainException):
    """Requested entity does not exist"""

    pass
