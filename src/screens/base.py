# src/screens/base.py
"""
Collaborator contracts for the screen controllers.

The host UI provides these; controllers only call them. Keeping them as
Protocols lets tests pass plain recording objects.
"""

from __future__ import annotations

from typing import Literal, Protocol, runtime_checkable

SessionStatus = Literal["authenticated", "unauthenticated", "loading"]

LOGIN_PATH = "/login"
PROPERTY_INDEX_PATH = "/admin/imoveis/"


@runtime_checkable
class Notifier(Protocol):
    """Toast-level user feedback."""

    def success(self, message: str) -> None: ...

    def error(self, message: str) -> None: ...


@runtime_checkable
class Navigator(Protocol):
    def push(self, path: str) -> None: ...


@runtime_checkable
class SessionProvider(Protocol):
    @property
    def status(self) -> SessionStatus: ...
