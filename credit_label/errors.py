"""
Exceptions raised by the credit_label helpers.

Every error also subclasses ValueError so callers that only expect bad input
can keep catching that.
"""


class CreditLabelError(ValueError):
    """Base class for all errors raised by this package."""


class SchemaError(CreditLabelError):
    """A required column is missing or is not numeric."""


class EmptyInputError(CreditLabelError):
    """An empty dataset was passed to a quantile or fit dependent step."""


class DegenerateLabelError(CreditLabelError):
    """Labels contain a single class, so the confusion matrix rates are undefined."""


class InvalidParameterError(CreditLabelError):
    """A parameter is outside its allowed range or set of values."""
