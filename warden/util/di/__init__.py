from warden.util.di.base import Provider
from warden.util.di.scope import Scope

__all__ = ["Provider", "Scope"]
