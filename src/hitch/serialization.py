import base64
import datetime
import enum
import io
import logging
import typing
import uuid

from .exceptions import HitchError, InvalidArgument, SerializationError
from .utils import JSONType, compact_json_dumps, format_datetime, parse_mimetype

logger = logging.getLogger(__name__)

JSON_CONTENT_TYPE = "application/json"


class Parsable:
    """Base class for models that can be written as a request body.
    Sub-classes hand back their wire names mapped to their values.
    """

    def get_field_values(self) -> typing.Mapping[str, typing.Any]:
        raise NotImplementedError()


class SerializationWriter:
    """Writes one or more models into a serialized document. Once all
    values are written '.get_serialized_content()' gives back the
    document as a binary stream positioned at the start.
    """

    def write_object_value(
        self, key: typing.Optional[str], value: typing.Any
    ) -> None:
        raise NotImplementedError()

    def write_collection_of_object_values(
        self, key: typing.Optional[str], values: typing.Iterable[typing.Any]
    ) -> None:
        raise NotImplementedError()

    def get_serialized_content(self) -> typing.BinaryIO:
        raise NotImplementedError()


class SerializationWriterFactory:
    """Creates 'SerializationWriter' instances for a content type"""

    @property
    def valid_content_type(self) -> str:
        raise NotImplementedError()

    def get_serialization_writer(self, content_type: str) -> SerializationWriter:
        raise NotImplementedError()


class _NoValue:
    def __repr__(self) -> str:
        return "<no value>"


_NO_VALUE = _NoValue()


class JsonSerializationWriter(SerializationWriter):
    def __init__(
        self,
        json_dumps: typing.Callable[[JSONType], str] = compact_json_dumps,
    ):
        self._json_dumps = json_dumps
        self._root: typing.Any = _NO_VALUE
        self._members: typing.Dict[str, JSONType] = {}

    def write_object_value(
        self, key: typing.Optional[str], value: typing.Any
    ) -> None:
        self._write(key, self._to_json(value))

    def write_collection_of_object_values(
        self, key: typing.Optional[str], values: typing.Iterable[typing.Any]
    ) -> None:
        self._write(key, [self._to_json(value) for value in values])

    def get_serialized_content(self) -> typing.BinaryIO:
        if self._root is _NO_VALUE:
            document: JSONType = dict(self._members)
        elif self._members:
            if not isinstance(self._root, dict):
                raise ValueError(
                    "Keyed values can only be written next to a root JSON object"
                )
            document = {**self._root, **self._members}
        else:
            document = self._root
        return io.BytesIO(self._json_dumps(document).encode("utf-8"))

    def _write(self, key: typing.Optional[str], value: JSONType) -> None:
        if key is None:
            self._root = value
        else:
            self._members[key] = value

    def _to_json(self, value: typing.Any) -> JSONType:
        if value is None or isinstance(value, (str, bool, int, float)):
            return value
        elif isinstance(value, Parsable):
            return {
                name: self._to_json(field_value)
                for name, field_value in value.get_field_values().items()
                if field_value is not None
            }
        elif isinstance(value, typing.Mapping):
            return {str(k): self._to_json(v) for k, v in value.items()}
        elif isinstance(value, enum.Enum):
            return self._to_json(value.value)
        elif isinstance(value, datetime.datetime):
            return format_datetime(value)
        elif isinstance(value, (datetime.date, datetime.time)):
            return value.isoformat()
        elif isinstance(value, uuid.UUID):
            return str(value)
        elif isinstance(value, (bytes, bytearray)):
            return base64.b64encode(value).decode("ascii")
        elif isinstance(value, (list, tuple, set, frozenset)):
            return [self._to_json(x) for x in value]
        raise TypeError(
            f"Object of type '{type(value).__name__}' can't be serialized to JSON"
        )


class JsonSerializationWriterFactory(SerializationWriterFactory):
    def __init__(
        self,
        json_dumps: typing.Callable[[JSONType], str] = compact_json_dumps,
    ):
        self._json_dumps = json_dumps

    @property
    def valid_content_type(self) -> str:
        return JSON_CONTENT_TYPE

    def get_serialization_writer(self, content_type: str) -> SerializationWriter:
        if not content_type:
            raise InvalidArgument("content_type cannot be empty.")
        mimetype = parse_mimetype(content_type)
        if mimetype.type != "application" or "json" not in (
            mimetype.subtype,
            mimetype.suffix,
        ):
            raise InvalidArgument(
                f"Expected a JSON content type but got '{content_type}'"
            )
        return JsonSerializationWriter(json_dumps=self._json_dumps)


class SerializationWriterFactoryRegistry(SerializationWriterFactory):
    """Picks the 'SerializationWriterFactory' registered for a content type.
    Parameters like 'charset' are ignored and vendor types with a structured
    syntax suffix fall back to the suffix, so 'application/vnd.api+json'
    is handled by the factory registered for 'application/json'.
    """

    def __init__(
        self,
        factories: typing.Optional[typing.Iterable[SerializationWriterFactory]] = None,
    ):
        self.content_type_associations: typing.Dict[
            str, SerializationWriterFactory
        ] = {}
        for factory in factories or ():
            self.register(factory)

    def register(
        self,
        factory: SerializationWriterFactory,
        content_type: typing.Optional[str] = None,
    ) -> None:
        content_type = str(parse_mimetype(content_type or factory.valid_content_type))
        self.content_type_associations[content_type] = factory

    @property
    def valid_content_type(self) -> str:
        raise HitchError(
            "The registry supports multiple content types. "
            "Get the registered factory instead."
        )

    def get_serialization_writer(self, content_type: str) -> SerializationWriter:
        if not content_type:
            raise InvalidArgument("content_type cannot be empty.")

        mimetype = parse_mimetype(content_type)
        candidates = [str(mimetype)]
        if mimetype.suffix:
            candidates.append(f"{mimetype.type}/{mimetype.suffix}")

        for candidate in candidates:
            factory = self.content_type_associations.get(candidate)
            if factory is not None:
                logger.debug(
                    "Using %r to serialize content type '%s'", factory, content_type
                )
                return factory.get_serialization_writer(candidate)

        raise SerializationError(
            f"Content type '{content_type}' does not have a factory "
            "registered to be serialized"
        )
