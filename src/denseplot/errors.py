"""Exceptions raised by denseplot."""


class InvalidParameter(ValueError):
    """A count, bin number, bandwidth or bound that cannot produce a result.

    Raised eagerly, before any partial result is built.
    """
