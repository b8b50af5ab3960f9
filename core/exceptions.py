"""Typed exceptions for billing rule violations."""


class ValidationError(ValueError):
    """
    Input refused by a domain rule (bad payment amount, incomplete invoice).

    Subclasses ValueError so the HTTP layer maps it to 400. Raised before any
    state is touched.
    """
