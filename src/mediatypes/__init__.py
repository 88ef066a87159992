"""mediatypes - File extension to media type registry synchronized from Apache, Debian and NGINX."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("mediatypes")
except PackageNotFoundError:
    __version__ = "0+local"
from mediatypes._grammar import is_valid_extension, is_valid_media_type
from mediatypes._storage import BlobStorage, FileBlobStorage, MemoryBlobStorage
from mediatypes._transport import AiohttpTransport, HttpResponse, Transport
from mediatypes.client import MediaTypes
from mediatypes.config import MediaTypesConfig
from mediatypes.exceptions import (
    InvalidArgumentsError,
    InvalidArgumentSyntaxError,
    InvalidArgumentTypeError,
    MediaTypesConfigError,
    MediaTypesError,
    MediaTypesParseError,
    MediaTypesStorageError,
    MediaTypesTransportError,
)
from mediatypes.ingestion.sources import Source, SourceSpec
from mediatypes.models import MediaType, ParsedFragment, RegistrySnapshot
from mediatypes.state.events import NotificationChannel

__all__ = [
    "__version__",
    "AiohttpTransport",
    "BlobStorage",
    "FileBlobStorage",
    "HttpResponse",
    "InvalidArgumentSyntaxError",
    "InvalidArgumentTypeError",
    "InvalidArgumentsError",
    "MediaType",
    "MediaTypes",
    "MediaTypesConfig",
    "MediaTypesConfigError",
    "MediaTypesError",
    "MediaTypesParseError",
    "MediaTypesStorageError",
    "MediaTypesTransportError",
    "MemoryBlobStorage",
    "NotificationChannel",
    "ParsedFragment",
    "RegistrySnapshot",
    "Source",
    "SourceSpec",
    "Transport",
    "is_valid_extension",
    "is_valid_media_type",
]
