import typing

if typing.TYPE_CHECKING:
    from .models import RequestDescriptor


class HitchError(Exception):
    """Base error type for 'Hitch' which may carry the RequestDescriptor
    that was being configured or resolved and the encapsulated error
    if this error wraps a different exception.
    """

    def __init__(
        self,
        message: str,
        request: typing.Optional["RequestDescriptor"] = None,
        error: typing.Optional[BaseException] = None,
    ):
        super().__init__(message)

        self.message = message
        self.request = request
        self.error = error


class InvalidArgument(HitchError, ValueError):
    """Error raised when a value handed to a RequestDescriptor
    can't be used to build a request
    """


class UriResolutionError(HitchError):
    """Error raised when a URI template can't be parsed or expanded"""


class SerializationError(HitchError):
    """Error raised when a request body can't be serialized.
    The original exception is available via '.error' and '__cause__'.
    """
