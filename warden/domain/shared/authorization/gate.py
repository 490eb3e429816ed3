"""Handler-level authorization gates: public(), authenticated() and requires(kind)."""

from __future__ import annotations

import logging
from collections.abc import Callable, Coroutine
from dataclasses import dataclass
from functools import wraps
from typing import Any

from warden.domain.shared.authorization.permission import PermissionKind

logger = logging.getLogger("warden.authz")

_HandlerMethod = Callable[..., Coroutine[Any, Any, Any]]


class Gate:
    """Base for handler-level authorization gates.

    Every CommandHandler/QueryHandler must declare ``__auth__: ClassVar[Gate]``.
    """


@dataclass(frozen=True)
class Public(Gate):
    """No authentication required."""


@dataclass(frozen=True)
class Authenticated(Gate):
    """Any authenticated principal, no capability required."""


@dataclass(frozen=True)
class Requires(Gate):
    """The principal's roles must grant ``kind``."""

    kind: PermissionKind


_PUBLIC = Public()
_AUTHENTICATED = Authenticated()


def public() -> Public:
    """Mark a handler as publicly accessible (no auth required)."""
    return _PUBLIC


def authenticated() -> Authenticated:
    """Mark a handler as requiring a signed-in caller."""
    return _AUTHENTICATED


def requires(kind: PermissionKind) -> Requires:
    """Mark a handler as requiring the given permission."""
    return Requires(kind=kind)


def wrap_run_with_gate(original_run: _HandlerMethod) -> _HandlerMethod:
    """Wrap a handler's run() so its __auth__ gate is enforced first.

    The handler is expected to carry ``identity`` (and ``evaluator`` for
    ``Requires`` gates) as dataclass fields injected by DI.
    """

    @wraps(original_run)
    async def gated_run(self: Any, cmd: Any) -> Any:
        from warden.domain.auth.model.principal import Principal
        from warden.domain.shared.error import AuthorizationError, ConfigurationError

        handler_name = type(self).__name__
        auth_gate = getattr(type(self), "__auth__", None)
        if not isinstance(auth_gate, Gate):
            raise ConfigurationError(f"Handler {handler_name} has no __auth__ declaration")

        if isinstance(auth_gate, Public):
            return await original_run(self, cmd)

        identity = getattr(self, "identity", None)

        if isinstance(auth_gate, Authenticated):
            if not isinstance(identity, Principal):
                raise AuthorizationError("Authentication required", code="missing_token")
            return await original_run(self, cmd)

        if isinstance(auth_gate, Requires):
            evaluator = getattr(self, "evaluator", None)
            if evaluator is None:
                raise ConfigurationError(
                    f"Handler {handler_name} requires {auth_gate.kind} but has no evaluator"
                )
            logger.debug("Auth check: handler=%s, required=%s", handler_name, auth_gate.kind)
            evaluator.guard(identity, auth_gate.kind)
            return await original_run(self, cmd)

        raise ConfigurationError(  # pragma: no cover
            f"Handler {handler_name} has unhandled __auth__ type: {type(auth_gate).__name__}"
        )

    return gated_run
