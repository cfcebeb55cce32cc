import logging

from collections.abc import Sequence
from typing import Any

from .error_accumulator import ErrorAccumulator
from .errors import ErrorCode, TransportInitError
from .requests_transport import RequestsTransport
from .response_buffer import ResponseAccumulator
from .result import Failure, Result, Success
from .transport import Transport, TransportFactory, TransportOption


logger = logging.getLogger(__name__)

START_FAILED_MESSAGE = "Failed to start transport."
ACCUMULATION_FAILED_MESSAGE = "Failed to get results from server."


class RequestExecutor:
    """Runs one HTTP request per `execute` call and folds the outcome into a Result.

    Every call gets its own transport handle and response buffer, so a single
    executor can be shared freely. Nothing here raises for request failures;
    they all come back as `Failure`.
    """

    def __init__(
        self,
        transport_factory: TransportFactory = RequestsTransport,
        max_body_bytes: int | None = None,
    ) -> None:
        self._transport_factory = transport_factory
        self._max_body_bytes = max_body_bytes

    def execute(
        self,
        url: str,
        method: str | None = None,
        headers: Sequence[tuple[str, str]] | None = None,
        body: bytes | str | None = None,
        timeout: float | None = None,
    ) -> Result:
        try:
            transport = self._transport_factory()
        except TransportInitError as e:
            logger.warning("Could not start transport for %s: %s", url, e)
            return Failure(START_FAILED_MESSAGE)

        try:
            return self._run(transport, url, method, headers, body, timeout)
        finally:
            transport.close()

    def _run(
        self,
        transport: Transport,
        url: str,
        method: str | None,
        headers: Sequence[tuple[str, str]] | None,
        body: bytes | str | None,
        timeout: float | None,
    ) -> Result:
        options: list[tuple[TransportOption, Any]] = [(TransportOption.URL, url)]
        if method:
            options.append((TransportOption.CUSTOM_REQUEST, method))
        if headers:
            options.append((TransportOption.HTTP_HEADER, list(headers)))
        if body is not None:
            options.append((TransportOption.POST_FIELDS, body))
        options.append((TransportOption.FOLLOW_LOCATION, True))
        if timeout is not None:
            options.append((TransportOption.TIMEOUT, timeout))

        errors = self._configure(transport, options)
        if errors:
            logger.warning("Transport returned errors while setting parameters: %s", errors)
            return Failure(str(errors))

        sink = ResponseAccumulator(max_bytes=self._max_body_bytes)
        errors = self._configure(transport, [(TransportOption.WRITE_FUNCTION, sink.write)])
        if errors:
            logger.warning("Transport returned errors while setting body sink: %s", errors)
            return Failure(str(errors))

        code = transport.perform()
        if code != ErrorCode.OK:
            message = transport.strerror(code)
            logger.warning("%s %s failed: %s", method or "GET", url, message)
            return Failure(message)

        if sink.failed:
            return Failure(ACCUMULATION_FAILED_MESSAGE)

        return Success(sink.text())

    @staticmethod
    def _configure(transport: Transport, options: list[tuple[TransportOption, Any]]) -> ErrorAccumulator:
        errors = ErrorAccumulator()
        for option, value in options:
            errors.add(transport.set_option(option, value))
        return errors
