"""Lexical environments: chained name-to-value scopes."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from roadrunner.objects import Object


class Environment:
    """A scope of bindings with an optional enclosing scope.

    Environments are shared by reference. Every closure defined in a scope
    holds that scope, and a function bound in a scope usually captures it,
    so environments and functions routinely form cycles. Nothing here walks
    into bound values: lookup follows the ``outer`` chain only, and repr
    lists local names only.
    """

    def __init__(self, outer: Environment | None = None) -> None:
        self.store: dict[str, Object] = {}
        self.outer = outer

    @classmethod
    def new_enclosed(cls, outer: Environment) -> Environment:
        """Create an empty scope whose lookups fall through to *outer*."""
        return cls(outer)

    def get(self, name: str) -> Object | None:
        """Look up *name* here, then in each enclosing scope in turn."""
        env: Environment | None = self
        while env is not None:
            if name in env.store:
                return env.store[name]
            env = env.outer
        return None

    def set(self, name: str, value: Object) -> Object:
        """Bind *name* in this scope, shadowing any outer binding."""
        self.store[name] = value
        return value

    def names(self) -> list[str]:
        """Names bound directly in this scope, in binding order."""
        return list(self.store)

    def depth(self) -> int:
        """Number of enclosing scopes above this one."""
        count = 0
        env = self.outer
        while env is not None:
            count += 1
            env = env.outer
        return count

    def __contains__(self, name: str) -> bool:
        return self.get(name) is not None

    def __repr__(self) -> str:
        return f"Environment(names={self.names()!r}, depth={self.depth()})"
