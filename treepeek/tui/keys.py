"""Reusable key-combo registry primitives."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

KeyHandler = Callable[[], "Awaitable[object] | bool | None"]


@dataclass(frozen=True)
class KeyComboBinding:
    """Mapping from one or more key tokens to a single action callback."""

    combos: tuple[str, ...]
    handler: KeyHandler


class KeyComboRegistry:
    """Small key-dispatch table with optional key normalization strategy."""

    def __init__(self, normalize: Callable[[str], str] | None = None) -> None:
        self._normalize = normalize if normalize is not None else self._identity
        self._handlers: dict[str, KeyHandler] = {}

    @staticmethod
    def _identity(key: str) -> str:
        return key

    def register_binding(self, binding: KeyComboBinding) -> KeyComboRegistry:
        """Register one binding, overwriting existing handlers for same combos."""
        for combo in binding.combos:
            self._handlers[self._normalize(combo)] = binding.handler
        return self

    def bind(self, *combos: str) -> Callable[[KeyHandler], KeyHandler]:
        """Decorator form of ``register_binding``."""

        def decorator(handler: KeyHandler) -> KeyHandler:
            self.register_binding(KeyComboBinding(tuple(combos), handler))
            return handler

        return decorator

    def handler_for(self, key: str) -> KeyHandler | None:
        return self._handlers.get(self._normalize(key))

    def dispatch(self, key: str):
        """Invoke bound handler for ``key``; ``None`` means unbound.

        Async handlers return their coroutine for the caller to await.
        """
        handler = self.handler_for(key)
        if handler is None:
            return None
        return handler()


__all__ = ["KeyHandler", "KeyComboBinding", "KeyComboRegistry"]
