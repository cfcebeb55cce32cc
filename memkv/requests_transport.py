import logging
import re
import threading

from collections.abc import Sequence
from typing import Any

import requests
import requests_unixsocket

from urllib3.exceptions import NameResolutionError, ProtocolError, ReadTimeoutError

from .errors import ErrorCode, TransportInitError, strerror
from .transport import Transport, TransportOption, WriteFunction


logger = logging.getLogger(__name__)

_CHUNK_SIZE = 16 * 1024
_METHOD_TOKEN = re.compile(r"^[!#$%&'*+.^_`|~0-9A-Za-z-]+$")

_init_lock = threading.Lock()
_user_agent: str | None = None


def global_init() -> bool:
    """Runs the process-wide transport setup once.

    Safe to call from any thread and any number of times. Returns True only
    for the call that actually did the setup. Transports refuse to start
    until this has run; `MemkvClient` calls it on construction.
    """
    global _user_agent
    with _init_lock:
        if _user_agent is not None:
            return False
        from . import __version__
        _user_agent = f"memkv-python/{__version__} {requests.utils.default_user_agent()}"
        logger.debug("Transport initialized with User-Agent %r", _user_agent)
        return True


def is_initialized() -> bool:
    return _user_agent is not None


class RequestsTransport(Transport):
    """One-shot transfer handle backed by a private `requests` session.

    Options are set one at a time and each call reports its own code, then
    `perform` runs a single request and streams the body into the write
    function. Hosts of the form http+unix://<quoted socket path> go over a
    Unix domain socket.
    """

    def __init__(self) -> None:
        if not is_initialized():
            raise TransportInitError("global_init() must be called before creating a transport.")

        try:
            self._session: requests.Session | None = requests_unixsocket.Session()
        except Exception as e:
            raise TransportInitError(f"Could not create HTTP session: {e}") from e
        self._session.headers["User-Agent"] = _user_agent

        self._url: str | None = None
        self._method: str | None = None
        self._headers: list[tuple[str, str]] = []
        self._body: bytes | None = None
        self._follow_location: bool = False
        self._write_function: WriteFunction | None = None
        self._timeout: float | None = None

        self.status_code: int | None = None
        self.last_error: str = ""

    def set_option(self, option: TransportOption, value: Any) -> ErrorCode:
        if self._session is None:
            return ErrorCode.FAILED_INIT

        setter = self._SETTERS.get(option)
        if setter is None:
            return ErrorCode.UNKNOWN_OPTION
        return setter(self, value)

    def _set_url(self, value: Any) -> ErrorCode:
        if not isinstance(value, str) or not value:
            return ErrorCode.URL_MALFORMAT
        self._url = value
        return ErrorCode.OK

    def _set_custom_request(self, value: Any) -> ErrorCode:
        if not isinstance(value, str) or not _METHOD_TOKEN.match(value):
            return ErrorCode.BAD_FUNCTION_ARGUMENT
        self._method = value
        return ErrorCode.OK

    def _set_http_header(self, value: Any) -> ErrorCode:
        if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
            return ErrorCode.BAD_FUNCTION_ARGUMENT

        headers = []
        for item in value:
            if not isinstance(item, tuple) or len(item) != 2:
                return ErrorCode.BAD_FUNCTION_ARGUMENT
            key, header_value = item
            if not isinstance(key, str) or not isinstance(header_value, str):
                return ErrorCode.BAD_FUNCTION_ARGUMENT
            if not key or ":" in key or any(c in key + header_value for c in "\r\n"):
                return ErrorCode.BAD_FUNCTION_ARGUMENT
            try:
                key.encode("ascii")
                header_value.encode("latin-1")
            except UnicodeEncodeError:
                return ErrorCode.BAD_FUNCTION_ARGUMENT
            headers.append((key, header_value))

        self._headers = headers
        return ErrorCode.OK

    def _set_post_fields(self, value: Any) -> ErrorCode:
        if isinstance(value, str):
            value = value.encode("utf-8")
        if not isinstance(value, (bytes, bytearray)):
            return ErrorCode.BAD_FUNCTION_ARGUMENT
        self._body = bytes(value)
        return ErrorCode.OK

    def _set_follow_location(self, value: Any) -> ErrorCode:
        if not isinstance(value, bool):
            return ErrorCode.BAD_FUNCTION_ARGUMENT
        self._follow_location = value
        return ErrorCode.OK

    def _set_write_function(self, value: Any) -> ErrorCode:
        if not callable(value):
            return ErrorCode.BAD_FUNCTION_ARGUMENT
        self._write_function = value
        return ErrorCode.OK

    def _set_timeout(self, value: Any) -> ErrorCode:
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            return ErrorCode.BAD_FUNCTION_ARGUMENT
        self._timeout = float(value)
        return ErrorCode.OK

    _SETTERS = {
        TransportOption.URL: _set_url,
        TransportOption.CUSTOM_REQUEST: _set_custom_request,
        TransportOption.HTTP_HEADER: _set_http_header,
        TransportOption.POST_FIELDS: _set_post_fields,
        TransportOption.FOLLOW_LOCATION: _set_follow_location,
        TransportOption.WRITE_FUNCTION: _set_write_function,
        TransportOption.TIMEOUT: _set_timeout,
    }

    def perform(self) -> ErrorCode:
        if self._session is None:
            return ErrorCode.FAILED_INIT
        if self._url is None:
            return ErrorCode.URL_MALFORMAT
        if self._write_function is None:
            return ErrorCode.BAD_FUNCTION_ARGUMENT

        method = self._method or ("POST" if self._body is not None else "GET")

        try:
            response = self._session.request(
                method,
                self._url,
                headers=dict(self._headers),
                data=self._body,
                allow_redirects=self._follow_location,
                stream=True,
                timeout=self._timeout,
            )
        except requests.exceptions.RequestException as e:
            return self._fail(_classify(e), e)

        with response:
            self.status_code = response.status_code
            try:
                for chunk in response.iter_content(chunk_size=_CHUNK_SIZE):
                    if not chunk:
                        continue
                    if self._write_function(chunk) != len(chunk):
                        self.last_error = "Write function consumed fewer bytes than it was given"
                        return ErrorCode.WRITE_ERROR
            except requests.exceptions.RequestException as e:
                return self._fail(_classify(e), e)

        return ErrorCode.OK

    def _fail(self, code: ErrorCode, exc: Exception) -> ErrorCode:
        self.last_error = str(exc)
        logger.debug("%s %s failed with code %d: %s", self._method or "GET", self._url, code, exc)
        return code

    def strerror(self, code: ErrorCode) -> str:
        return strerror(code)

    def close(self) -> None:
        if self._session is not None:
            try:
                self._session.close()
            finally:
                self._session = None


def _classify(exc: requests.exceptions.RequestException) -> ErrorCode:
    # Order matters: several of these subclass ConnectionError.
    if isinstance(exc, requests.exceptions.Timeout):
        return ErrorCode.OPERATION_TIMEDOUT
    if isinstance(exc, requests.exceptions.TooManyRedirects):
        return ErrorCode.TOO_MANY_REDIRECTS
    if isinstance(exc, requests.exceptions.SSLError):
        return ErrorCode.SSL_CONNECT_ERROR
    if isinstance(exc, requests.exceptions.InvalidSchema):
        return ErrorCode.UNSUPPORTED_PROTOCOL
    if isinstance(exc, (requests.exceptions.MissingSchema, requests.exceptions.InvalidURL)):
        return ErrorCode.URL_MALFORMAT
    if isinstance(exc, (requests.exceptions.ChunkedEncodingError, requests.exceptions.ContentDecodingError)):
        return ErrorCode.RECV_ERROR
    if isinstance(exc, requests.exceptions.ConnectionError):
        reason = exc.args[0] if exc.args else None
        reason = getattr(reason, "reason", reason)
        if isinstance(reason, (ReadTimeoutError, TimeoutError)):
            return ErrorCode.OPERATION_TIMEDOUT
        if isinstance(reason, NameResolutionError):
            return ErrorCode.COULDNT_RESOLVE_HOST
        if isinstance(reason, ProtocolError):
            return ErrorCode.GOT_NOTHING
        return ErrorCode.COULDNT_CONNECT
    return ErrorCode.RECV_ERROR
