import datetime
import enum
import io
import json
import uuid

import pytest
import hitch


class Color(enum.Enum):
    RED = "red"


class User(hitch.Parsable):
    def __init__(self, name, age=None, manager=None):
        self.name = name
        self.age = age
        self.manager = manager

    def get_field_values(self):
        return {"name": self.name, "age": self.age, "manager": self.manager}


class Unserializable(hitch.Parsable):
    def get_field_values(self):
        return {"value": object()}


class BrokenFactory(hitch.SerializationWriterFactory):
    def __init__(self):
        self.error = RuntimeError("no writer today")

    @property
    def valid_content_type(self):
        return "application/json"

    def get_serialization_writer(self, content_type):
        raise self.error


def json_registry():
    return hitch.SerializationWriterFactoryRegistry(
        [hitch.JsonSerializationWriterFactory()]
    )


def test_set_stream_content_bytes():
    req = hitch.RequestDescriptor("POST")
    req.set_stream_content(b"Hello, world!")

    assert req.content.read() == b"Hello, world!"
    assert req.headers["Content-Type"] == "application/octet-stream"


def test_set_stream_content_file():
    req = hitch.RequestDescriptor("PUT")
    f = io.BytesIO(b"GIF89a")
    req.set_stream_content(f)

    assert req.content is f
    assert req.headers[hitch.CONTENT_TYPE_HEADER] == hitch.BINARY_CONTENT_TYPE


def test_set_stream_content_overwrites_serialized_content():
    req = hitch.RequestDescriptor("POST")
    req.set_content_from_parsable(json_registry(), "application/json", User("a"))
    req.set_stream_content(b"raw")

    assert req.content.read() == b"raw"
    assert req.headers == {"Content-Type": "application/octet-stream"}


def test_set_content_from_parsable_single_value():
    req = hitch.RequestDescriptor("POST")
    req.set_content_from_parsable(json_registry(), "application/json", User("a", 1))

    assert req.headers["Content-Type"] == "application/json"
    assert req.content.read() == b'{"name":"a","age":1}'


def test_set_content_from_parsable_multiple_values():
    req = hitch.RequestDescriptor("POST")
    req.set_content_from_parsable(
        json_registry(), "application/json", User("a", 1), User("b", 2)
    )

    assert req.content.read() == b'[{"name":"a","age":1},{"name":"b","age":2}]'


def test_set_content_from_parsable_nested_values():
    req = hitch.RequestDescriptor("POST")
    req.set_content_from_parsable(
        json_registry(), "application/json", User("a", manager=User("b"))
    )

    assert json.loads(req.content.read()) == {"name": "a", "manager": {"name": "b"}}


def test_set_content_from_parsable_no_values():
    req = hitch.RequestDescriptor("POST")

    with pytest.raises(hitch.InvalidArgument):
        req.set_content_from_parsable(json_registry(), "application/json")
    assert req.content is None
    assert req.headers == {}


def test_set_content_from_parsable_writer_failure():
    req = hitch.RequestDescriptor("POST")
    factory = BrokenFactory()

    with pytest.raises(hitch.SerializationError) as e:
        req.set_content_from_parsable(factory, "application/json", User("a"))

    assert e.value.message == "could not serialize payload."
    assert e.value.error is factory.error
    assert e.value.__cause__ is factory.error
    assert e.value.request is req


def test_set_content_from_parsable_unserializable_value():
    req = hitch.RequestDescriptor("POST")

    with pytest.raises(hitch.SerializationError) as e:
        req.set_content_from_parsable(
            json_registry(), "application/json", Unserializable()
        )
    assert isinstance(e.value.__cause__, TypeError)
    assert req.content is None
    assert req.headers == {}


def test_set_content_from_parsable_unknown_content_type():
    req = hitch.RequestDescriptor("POST")

    with pytest.raises(hitch.SerializationError) as e:
        req.set_content_from_parsable(json_registry(), "text/csv", User("a"))
    assert isinstance(e.value.__cause__, hitch.SerializationError)


@pytest.mark.parametrize(
    "content_type",
    ["application/json", "application/json; charset=utf-8", "application/vnd.api+json"],
)
def test_registry_content_types(content_type):
    req = hitch.RequestDescriptor("POST")
    req.set_content_from_parsable(json_registry(), content_type, User("a"))

    assert req.headers["Content-Type"] == content_type
    assert req.content.read() == b'{"name":"a"}'


def test_registry_empty_content_type():
    with pytest.raises(hitch.InvalidArgument):
        json_registry().get_serialization_writer("")


def test_registry_has_no_single_content_type():
    with pytest.raises(hitch.HitchError):
        json_registry().valid_content_type


def test_json_writer_values():
    writer = hitch.JsonSerializationWriter()
    writer.write_object_value(
        None,
        {
            "when": datetime.datetime(2024, 1, 2, 3, 4, 5, tzinfo=datetime.timezone.utc),
            "day": datetime.date(2024, 1, 2),
            "color": Color.RED,
            "id": uuid.UUID("12345678-1234-5678-1234-567812345678"),
            "blob": b"\x00\x01",
            "tags": ("a", "b"),
        },
    )

    assert json.loads(writer.get_serialized_content().read()) == {
        "when": "2024-01-02T03:04:05+00:00",
        "day": "2024-01-02",
        "color": "red",
        "id": "12345678-1234-5678-1234-567812345678",
        "blob": "AAE=",
        "tags": ["a", "b"],
    }


def test_json_writer_keyed_values():
    writer = hitch.JsonSerializationWriter()
    writer.write_object_value("owner", User("a"))
    writer.write_collection_of_object_values("members", [User("b"), User("c")])

    assert writer.get_serialized_content().read() == (
        b'{"owner":{"name":"a"},"members":[{"name":"b"},{"name":"c"}]}'
    )


def test_json_writer_keyed_value_next_to_root_collection():
    writer = hitch.JsonSerializationWriter()
    writer.write_collection_of_object_values(None, [User("a")])
    writer.write_object_value("owner", User("b"))

    with pytest.raises(ValueError):
        writer.get_serialized_content()


def test_json_writer_custom_dumps():
    factory = hitch.JsonSerializationWriterFactory(
        json_dumps=lambda obj: json.dumps(obj, indent=2)
    )
    writer = factory.get_serialization_writer("application/json")
    writer.write_object_value(None, User("a"))

    assert writer.get_serialized_content().read() == b'{\n  "name": "a"\n}'


def test_json_factory_rejects_other_content_types():
    with pytest.raises(hitch.InvalidArgument):
        hitch.JsonSerializationWriterFactory().get_serialization_writer("text/plain")
