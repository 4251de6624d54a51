import datetime
import json
import typing

JSONType = typing.Union[
    typing.Mapping[typing.Any, typing.Any],
    typing.Sequence[typing.Any],
    int,
    bool,
    str,
    float,
    None,
]


class MimeType(typing.NamedTuple):
    type: str
    subtype: str
    suffix: str
    parameters: typing.Dict[str, typing.Optional[str]]

    def __hash__(self) -> int:
        parameters = tuple(sorted(self.parameters.items()))
        return hash((self.type, self.subtype, self.suffix, parameters))

    def __str__(self) -> str:
        """Renders the mime type without parameters"""
        if not self.type:
            return ""
        return (
            f"{self.type}"
            f"{'/' + self.subtype if self.subtype else ''}"
            f"{'+' + self.suffix if self.suffix else ''}"
        )


def parse_mimetype(mimetype: str) -> MimeType:
    if not mimetype:
        return MimeType(type="", subtype="", suffix="", parameters={})

    parts = mimetype.split(";")
    params = {}
    for item in parts[1:]:
        if not item:
            continue
        key, value = typing.cast(
            typing.Tuple[str, typing.Optional[str]],
            item.split("=", 1) if "=" in item else (item, None),
        )
        params[key.lower().strip()] = value.strip(' "') if value else value

    mimetype_no_params = parts[0].strip().lower()
    if mimetype_no_params == "*":
        mimetype_no_params = "*/*"

    type, subtype = typing.cast(
        typing.Tuple[str, str],
        mimetype_no_params.split("/", 1)
        if "/" in mimetype_no_params
        else (mimetype_no_params, ""),
    )
    subtype, suffix = typing.cast(
        typing.Tuple[str, str],
        subtype.split("+", 1) if "+" in subtype else (subtype, ""),
    )
    return MimeType(type=type, subtype=subtype, suffix=suffix, parameters=params)


def compact_json_dumps(obj: JSONType) -> str:
    """Function that doesn't add extra whitespace when encoding JSON"""
    return json.dumps(obj, separators=(",", ":"))


def format_datetime(value: datetime.datetime) -> str:
    """Formats a datetime the way RFC 3339 / ATOM expects it:
    'YYYY-MM-DDTHH:MM:SS+HH:MM'. Fractional seconds are dropped
    and naive datetimes are rendered without an offset.
    """
    return value.isoformat(timespec="seconds")


def sanitize_value(value: typing.Any) -> typing.Any:
    """Converts date and time values into their ISO-8601 string form
    so a URI template never sees a native date object. All other
    values are returned unchanged.
    """
    # 'datetime' is a subclass of 'date' so it has to be checked first.
    if isinstance(value, datetime.datetime):
        return format_datetime(value)
    elif isinstance(value, datetime.date):
        return value.isoformat()
    elif isinstance(value, datetime.time):
        return value.replace(microsecond=0).isoformat()
    return value


def is_empty_value(value: typing.Any) -> bool:
    """Returns whether a query parameter value should be left out of
    the request entirely. 'None', empty strings and empty collections
    are empty, zero and 'False' are real values and are kept.
    """
    if value is None:
        return True
    if isinstance(value, (str, bytes, list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False
