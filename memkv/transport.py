from enum import Enum
from typing import Any, Callable, Protocol

from .errors import ErrorCode


WriteFunction = Callable[[bytes], int]


class TransportOption(Enum):
    URL = "url"
    CUSTOM_REQUEST = "custom_request"
    HTTP_HEADER = "http_header"
    POST_FIELDS = "post_fields"
    FOLLOW_LOCATION = "follow_location"
    WRITE_FUNCTION = "write_function"
    TIMEOUT = "timeout"


class Transport(Protocol):
    def set_option(self, option: TransportOption, value: Any) -> ErrorCode:
        ...

    def perform(self) -> ErrorCode:
        ...

    def strerror(self, code: ErrorCode) -> str:
        ...

    def close(self) -> None:
        ...


TransportFactory = Callable[[], Transport]
