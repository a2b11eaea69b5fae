# core/numbering/exceptions.py


class NumberingError(Exception):
    """Base class for every error raised by the identifier machinery."""


class InvalidArgument(NumberingError, ValueError):
    """
    An out-of-domain value was passed to a pure formatting helper
    (month outside 1..12, unknown project code, non-positive version...).

    Always raised before any I/O happens.
    """


class SequenceAllocationFailed(NumberingError):
    """
    The counter round-trip to the database failed.

    The underlying exception is chained (``raise ... from exc``) and also kept
    on ``cause``. A caller that gets this error must not format an identifier:
    the sequence value is unconfirmed.
    """

    def __init__(self, sequence_type, scope_key=None, fiscal_year=None, cause=None):
        self.sequence_type = str(sequence_type)
        self.scope_key = scope_key
        self.fiscal_year = fiscal_year
        self.cause = cause

        message = f"Failed to allocate {self.sequence_type} sequence"
        if scope_key:
            message += f" for {scope_key}"
        if fiscal_year:
            message += f" (FY {fiscal_year})"
        if cause is not None:
            message += f": {cause}"
        super().__init__(message)
