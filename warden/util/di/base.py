from dishka import Provider as DishkaProvider

from warden.util.di.scope import Scope


class Provider(DishkaProvider):
    """Base for Warden providers. Dependencies default to the unit-of-work scope."""

    scope = Scope.UOW
