import dataclasses
import enum
import io
import logging
import typing

from .exceptions import InvalidArgument, SerializationError
from .serialization import SerializationWriterFactory
from .uri_template import UriTemplateExpander
from .utils import is_empty_value, sanitize_value

logger = logging.getLogger(__name__)

# Path parameter which, when holding a string, is used as the request URI as-is.
RAW_URL_KEY = "request-raw-url"
BASE_URL_KEY = "baseurl"
BASE_URL_TOKEN = "{+baseurl}"
CONTENT_TYPE_HEADER = "Content-Type"
BINARY_CONTENT_TYPE = "application/octet-stream"

HeadersType = typing.Mapping[str, str]
ParametersType = typing.Mapping[str, typing.Any]
StreamType = typing.Union[bytes, bytearray, typing.BinaryIO]


class HttpMethod(enum.Enum):
    GET = "GET"
    POST = "POST"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"
    CONNECT = "CONNECT"
    PUT = "PUT"
    TRACE = "TRACE"
    HEAD = "HEAD"

    @classmethod
    def parse(cls, value: typing.Union[str, "HttpMethod"]) -> "HttpMethod":
        if isinstance(value, HttpMethod):
            return value
        try:
            return cls(value.upper())
        except (AttributeError, ValueError):
            raise InvalidArgument(f"unknown HTTP method '{value}'") from None

    def __str__(self) -> str:
        return self.value


class RequestOption:
    """An option that only applies to a single request, like a
    response handler or a per-request timeout read by the transport.
    A request holds at most one option of each 'kind'. The kind defaults
    to the dotted name of the option's class and sub-classes can set
    'kind' to a fixed string to keep it stable across renames.
    """

    kind: typing.ClassVar[typing.Optional[str]] = None

    def __init_subclass__(cls, **kwargs: typing.Any) -> None:
        super().__init_subclass__(**kwargs)
        if "kind" not in cls.__dict__ or cls.__dict__["kind"] is None:
            cls.kind = f"{cls.__module__}.{cls.__qualname__}"


class QueryParameters:
    """Base class for the options objects that generated client methods
    accept for their query string. Each implementation decides which
    name every value is sent under via 'to_query_parameter_entries()'.

    Dataclass sub-classes get that for free: every declared field is
    emitted in order under its alias from 'query_parameter_aliases'
    or under the field name if it has no alias.
    """

    query_parameter_aliases: typing.ClassVar[typing.Mapping[str, str]] = {}

    @classmethod
    def alias(cls, name: str) -> str:
        return cls.query_parameter_aliases.get(name, name)

    def to_query_parameter_entries(
        self,
    ) -> typing.Iterable[typing.Tuple[str, typing.Any]]:
        if not dataclasses.is_dataclass(self):
            raise NotImplementedError()
        return [
            (self.alias(field.name), getattr(self, field.name))
            for field in dataclasses.fields(self)
        ]


class RequestDescriptor:
    """Everything needed to send one request that hasn't been sent yet.
    Generated API clients build one of these per call, the transport
    reads the resolved '.uri', '.headers' and '.content' off it.

    The URI is either expanded from 'url_template' using the path and
    query parameters or, once set via 'set_uri()' (or via the
    'request-raw-url' path parameter) taken verbatim. Setting the URI
    directly drops all parameters so there is only ever one source.
    """

    def __init__(
        self,
        method: typing.Optional[typing.Union[str, HttpMethod]] = None,
        url_template: str = "",
        path_parameters: typing.Optional[ParametersType] = None,
        *,
        headers: typing.Optional[HeadersType] = None,
    ):
        self._http_method: typing.Optional[HttpMethod] = None
        if method is not None:
            self.http_method = method

        self.url_template = url_template
        self.path_parameters: typing.Dict[str, typing.Any] = dict(
            path_parameters or {}
        )
        self.query_parameters: typing.Dict[str, typing.Any] = {}
        self.content: typing.Optional[typing.BinaryIO] = None

        self._uri: typing.Optional[str] = None
        self._headers: typing.Dict[str, str] = dict(headers or {})
        self._request_options: typing.Dict[str, RequestOption] = {}

    @property
    def http_method(self) -> typing.Optional[HttpMethod]:
        return self._http_method

    @http_method.setter
    def http_method(self, value: typing.Union[str, HttpMethod]) -> None:
        self._http_method = HttpMethod.parse(value)

    @property
    def uri(self) -> str:
        return self.get_uri()

    @uri.setter
    def uri(self, value: str) -> None:
        self.set_uri(value)

    def get_uri(self) -> str:
        """Resolves the URI of the request. Raises 'InvalidArgument'
        if the template needs a 'baseurl' that wasn't given and
        'UriResolutionError' if the template can't be expanded.
        """
        if self._uri:
            return self._uri

        raw_url = self.path_parameters.get(RAW_URL_KEY)
        if isinstance(raw_url, str):
            logger.debug("Using '%s' path parameter as the request URI", RAW_URL_KEY)
            self.set_uri(raw_url)
            return raw_url

        template = UriTemplateExpander(self.url_template)
        if (
            BASE_URL_TOKEN in self.url_template.lower()
            and self.path_parameters.get(BASE_URL_KEY) is None
        ):
            raise InvalidArgument(
                f"path_parameters must contain a value for '{BASE_URL_KEY}' "
                "for the url to be built.",
                request=self,
            )

        for key, value in self.path_parameters.items():
            self.path_parameters[key] = sanitize_value(value)
        for key, value in self.query_parameters.items():
            self.query_parameters[key] = sanitize_value(value)

        # Query parameters win over path parameters with the same name.
        params = {**self.path_parameters, **self.query_parameters}
        return template.expand(params)

    def set_uri(self, uri: str) -> None:
        if not uri:
            raise InvalidArgument("uri cannot be empty.", request=self)
        self._uri = uri
        self.query_parameters = {}
        self.path_parameters = {}

    @property
    def request_options(self) -> typing.Dict[str, RequestOption]:
        """Gets the request options for this request. Options are unique
        by kind. If an option of the same kind is added twice the last one wins.
        """
        return dict(self._request_options)

    def get_request_option(
        self, kind: typing.Union[str, typing.Type[RequestOption]]
    ) -> typing.Optional[RequestOption]:
        if not isinstance(kind, str):
            kind = kind.kind
        return self._request_options.get(kind)

    def add_request_options(self, *options: RequestOption) -> None:
        if not options:
            return
        for option in options:
            self._request_options[option.kind] = option

    def remove_request_options(self, *options: RequestOption) -> None:
        for option in options:
            self._request_options.pop(option.kind, None)

    def set_stream_content(self, value: StreamType) -> None:
        """Sets the request body to a binary stream. Bytes are wrapped
        into a stream, the Content-Type is always 'application/octet-stream'.
        """
        if isinstance(value, (bytes, bytearray)):
            value = io.BytesIO(value)
        self.content = value
        self._headers[CONTENT_TYPE_HEADER] = BINARY_CONTENT_TYPE
        logger.debug("Set binary request body for %r", self)

    def set_content_from_parsable(
        self,
        writer_factory: SerializationWriterFactory,
        content_type: str,
        *values: typing.Any,
    ) -> None:
        """Sets the request body by serializing one or more models with the
        writer for 'content_type'. A single model is written as an object,
        multiple models as a collection of objects.
        """
        if not values:
            raise InvalidArgument("values cannot be empty.", request=self)

        try:
            writer = writer_factory.get_serialization_writer(content_type)

            if len(values) == 1:
                writer.write_object_value(None, values[0])
            else:
                writer.write_collection_of_object_values(None, values)
            self.content = writer.get_serialized_content()
            self._headers[CONTENT_TYPE_HEADER] = content_type
        except Exception as e:
            raise SerializationError(
                "could not serialize payload.", request=self, error=e
            ) from e
        logger.debug(
            "Serialized %d value(s) as '%s' for %r", len(values), content_type, self
        )

    def set_query_parameters(self, options: typing.Optional[QueryParameters]) -> None:
        if options is None:
            return
        for name, value in options.to_query_parameter_entries():
            if is_empty_value(value):
                continue
            self.query_parameters[name] = value

    def set_path_parameters(self, path_parameters: ParametersType) -> None:
        self.path_parameters = dict(path_parameters)

    @property
    def headers(self) -> typing.Dict[str, str]:
        return self._headers

    def set_headers(self, headers: HeadersType) -> None:
        """Merges headers into the existing ones, values for names
        that are already present are replaced.
        """
        self._headers.update(headers)

    def remove_headers(self, *names: str) -> None:
        for name in names:
            self._headers.pop(name, None)

    def __repr__(self) -> str:
        method = self._http_method.value if self._http_method else "?"
        return f"<RequestDescriptor [{method}]>"
