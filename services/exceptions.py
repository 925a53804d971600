"""Service-level error kinds mapped to HTTP status codes by the blueprints.

NotFoundError and InvalidInputError subclass ValueError so callers that only
distinguish bad input from server failures can keep catching ValueError.
Unexpected persistence failures surface as RuntimeError.
"""


class NotFoundError(ValueError):
    """Referenced user or item does not exist (404)"""


class InvalidInputError(ValueError):
    """Request is well-formed but cannot be applied (400)"""


class ConflictError(ValueError):
    """Operation collides with existing data, e.g. duplicate email (409)"""
