"""metasys-py: Asynchronous Metasys REST API client for Python 3.11+.

Typical usage::

    from metasys_py import Client

    async with Client("nae.example.com") as client:
        await client.login("user", "secret")
        value = await client.read_property(object_id, "presentValue")
"""

__version__ = "0.1.0"

from metasys_py.app.application import ClientConfig, MetasysApplication
from metasys_py.app.session import Credential
from metasys_py.client import Client
from metasys_py.errors import (
    MetasysBaseError,
    MetasysHttpError,
    MetasysIdentifierError,
    MetasysNotFoundError,
    MetasysObjectTypeError,
    MetasysParsingError,
    MetasysPropertyError,
    MetasysTimeoutError,
    MetasysTokenError,
    MetasysTransportError,
)
from metasys_py.localization import EnumTranslator
from metasys_py.serialization import deserialize, serialize
from metasys_py.serialization.json import json_default
from metasys_py.sync import SyncClient
from metasys_py.types import (
    Command,
    ObjectNode,
    ObjectTypeDescriptor,
    Variant,
    VariantBundle,
    VariantKind,
)

__all__ = [
    "Client",
    "ClientConfig",
    "Command",
    "Credential",
    "EnumTranslator",
    "MetasysApplication",
    "MetasysBaseError",
    "MetasysHttpError",
    "MetasysIdentifierError",
    "MetasysNotFoundError",
    "MetasysObjectTypeError",
    "MetasysParsingError",
    "MetasysPropertyError",
    "MetasysTimeoutError",
    "MetasysTokenError",
    "MetasysTransportError",
    "ObjectNode",
    "ObjectTypeDescriptor",
    "SyncClient",
    "Variant",
    "VariantBundle",
    "VariantKind",
    "__version__",
    "deserialize",
    "json_default",
    "serialize",
]
