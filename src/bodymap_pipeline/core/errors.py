"""
Exceptions raised by the classification pipeline.
"""


class InvalidInputError(ValueError):
    """Raised when an expression matrix is structurally invalid.

    Covers duplicate gene or body-part identifiers, fewer than two body
    parts, negative values and non-numeric columns.
    """
