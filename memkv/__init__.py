__version__ = "0.1.0"

from .client import MemkvClient
from .config import ClientConfig
from .errors import ClientError, ConfigError, ErrorCode, MemkvError, TransportError, TransportInitError
from .executor import RequestExecutor
from .requests_transport import RequestsTransport, global_init
from .result import Failure, Result, Success

__all__ = [
    "ClientConfig",
    "ClientError",
    "ConfigError",
    "ErrorCode",
    "Failure",
    "MemkvClient",
    "MemkvError",
    "RequestExecutor",
    "RequestsTransport",
    "Result",
    "Success",
    "TransportError",
    "TransportInitError",
    "global_init",
]
