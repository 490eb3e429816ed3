"""Custom Dishka scopes for Warden."""

from dishka import BaseScope, new_scope


class Scope(BaseScope):  # type: ignore[misc]  # BaseScope is designed to be subclassed
    """Warden dependency injection scopes.

    Hierarchy: APP -> UOW

    - APP: Application lifetime (engine, policy table, evaluator)
    - UOW: Unit of Work (one HTTP request or one CLI operation)
    """

    APP = new_scope("APP")
    UOW = new_scope("UOW")
