from enum import IntEnum


class MemkvError(Exception):
    """Base exception for the memkv library."""
    pass

# --- Transport Errors ---

class TransportError(MemkvError):
    """A generic error occurred in the transport layer."""
    pass

class TransportInitError(TransportError): pass

# --- Client Errors ---

class ClientError(MemkvError):
    """A generic error occurred in the client logic."""
    pass

class ConfigError(ClientError): pass


# --- Transfer Codes ---
# Every code stays below 100 so several of them pack into one integer.

class ErrorCode(IntEnum):
    OK = 0
    UNSUPPORTED_PROTOCOL = 1
    FAILED_INIT = 2
    URL_MALFORMAT = 3
    COULDNT_RESOLVE_HOST = 6
    COULDNT_CONNECT = 7
    WRITE_ERROR = 23
    OPERATION_TIMEDOUT = 28
    SSL_CONNECT_ERROR = 35
    BAD_FUNCTION_ARGUMENT = 43
    TOO_MANY_REDIRECTS = 47
    UNKNOWN_OPTION = 48
    GOT_NOTHING = 52
    RECV_ERROR = 56


_MESSAGES: dict[ErrorCode, str] = {
    ErrorCode.OK: "No error",
    ErrorCode.UNSUPPORTED_PROTOCOL: "Unsupported protocol",
    ErrorCode.FAILED_INIT: "Failed initialization",
    ErrorCode.URL_MALFORMAT: "URL using bad/illegal format or missing URL",
    ErrorCode.COULDNT_RESOLVE_HOST: "Couldn't resolve host name",
    ErrorCode.COULDNT_CONNECT: "Couldn't connect to server",
    ErrorCode.WRITE_ERROR: "Failed writing received data to disk/application",
    ErrorCode.OPERATION_TIMEDOUT: "Timeout was reached",
    ErrorCode.SSL_CONNECT_ERROR: "SSL connect error",
    ErrorCode.BAD_FUNCTION_ARGUMENT: "A transport option was given a bad argument",
    ErrorCode.TOO_MANY_REDIRECTS: "Number of redirects hit maximum amount",
    ErrorCode.UNKNOWN_OPTION: "An unknown option was passed in",
    ErrorCode.GOT_NOTHING: "Server returned nothing (no headers, no data)",
    ErrorCode.RECV_ERROR: "Failure when receiving data from the peer",
}


def strerror(code: int) -> str:
    try:
        return _MESSAGES[ErrorCode(code)]
    except ValueError:
        return "Unknown error"
