"""Startup validation for handler authorization declarations."""

import logging

from warden.domain.shared.authorization.gate import Gate
from warden.domain.shared.command import CommandHandler
from warden.domain.shared.error import ConfigurationError
from warden.domain.shared.query import QueryHandler

logger = logging.getLogger(__name__)


def _all_subclasses(cls: type) -> list[type]:
    found: list[type] = []
    for sub in cls.__subclasses__():
        found.append(sub)
        found.extend(_all_subclasses(sub))
    return found


def check_handler_class(handler_cls: type) -> None:
    """Raise ConfigurationError if ``handler_cls`` does not declare a Gate."""
    if not isinstance(getattr(handler_cls, "__auth__", None), Gate):
        raise ConfigurationError(f"Handler {handler_cls.__name__} has no __auth__ declaration")


def validate_all_handlers(package: str = "warden") -> None:
    """Scan every CommandHandler and QueryHandler subclass defined under ``package``.

    Raises ConfigurationError listing all handlers missing __auth__ declarations.
    """
    violations: list[str] = []
    handlers = [
        cls
        for cls in _all_subclasses(CommandHandler) + _all_subclasses(QueryHandler)
        if cls.__module__ == package or cls.__module__.startswith(f"{package}.")
    ]

    for handler_cls in handlers:
        try:
            check_handler_class(handler_cls)
        except ConfigurationError as e:
            violations.append(str(e))

    if violations:
        raise ConfigurationError(
            f"Authorization validation failed for {len(violations)} handler(s):\n"
            + "\n".join(f"  - {v}" for v in violations)
        )

    logger.info("Authorization startup validation passed for %d handlers", len(handlers))
