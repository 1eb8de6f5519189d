"""Application layer: session, attribute I/O and tree traversal."""

from __future__ import annotations

from metasys_py.app.application import ClientConfig, MetasysApplication
from metasys_py.app.properties import PropertyClient
from metasys_py.app.session import Credential, SessionManager
from metasys_py.app.tree import TreeClient

__all__ = [
    "ClientConfig",
    "Credential",
    "MetasysApplication",
    "PropertyClient",
    "SessionManager",
    "TreeClient",
]
