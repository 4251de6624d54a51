from .exceptions import (
    HitchError,
    InvalidArgument,
    UriResolutionError,
    SerializationError,
)
from .models import (
    RequestDescriptor,
    RequestOption,
    QueryParameters,
    HttpMethod,
    RAW_URL_KEY,
    BASE_URL_KEY,
    CONTENT_TYPE_HEADER,
    BINARY_CONTENT_TYPE,
)
from .serialization import (
    Parsable,
    SerializationWriter,
    SerializationWriterFactory,
    SerializationWriterFactoryRegistry,
    JsonSerializationWriter,
    JsonSerializationWriterFactory,
)
from .uri_template import UriTemplateExpander

__all__ = [
    "RequestDescriptor",
    "RequestOption",
    "QueryParameters",
    "HttpMethod",
    "RAW_URL_KEY",
    "BASE_URL_KEY",
    "CONTENT_TYPE_HEADER",
    "BINARY_CONTENT_TYPE",
    "Parsable",
    "SerializationWriter",
    "SerializationWriterFactory",
    "SerializationWriterFactoryRegistry",
    "JsonSerializationWriter",
    "JsonSerializationWriterFactory",
    "UriTemplateExpander",
    "HitchError",
    "InvalidArgument",
    "UriResolutionError",
    "SerializationError",
]

__version__ = "dev"
