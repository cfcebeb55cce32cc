from .config import ClientConfig
from .executor import RequestExecutor
from .requests_transport import global_init
from .result import Result
from .url import build_url


KEYS_RESOURCE = "keys"
PING_RESOURCE = "ping"
PUT_HEADERS = [("Content-Type", "application/octet-stream")]


class MemkvClient:
    """Client for a MemoryKV server.

    Holds only the server configuration, which never changes after
    construction, so one client can be used from several threads at once.
    """

    def __init__(self, config: ClientConfig | str, executor: RequestExecutor | None = None):
        if isinstance(config, str):
            config = ClientConfig(host=config)
        global_init()
        self._config = config
        self._executor = executor or RequestExecutor(max_body_bytes=config.max_body_bytes)

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def config(self) -> ClientConfig:
        return self._config

    def get_key(self, key: str) -> Result:
        """Fetches the value stored under `key`."""
        return self._execute(build_url(self.host, key))

    def put_key(self, key: str, body: bytes | str) -> Result:
        """Stores `body` under `key`; the server answers with the previous value, if any."""
        return self._execute(build_url(self.host, key), "PUT", PUT_HEADERS, body)

    def delete_key(self, key: str) -> Result:
        """Removes `key`; the server answers with the removed value, if any."""
        return self._execute(build_url(self.host, key), "DELETE")

    def list_keys(self) -> Result:
        return self._execute(build_url(self.host, KEYS_RESOURCE))

    def list_keys_with_prefix(self, prefix: str) -> Result:
        return self._execute(self._prefix_url(prefix))

    def delete_keys_with_prefix(self, prefix: str) -> Result:
        """Removes every key starting with `prefix` and returns the removed keys."""
        return self._execute(self._prefix_url(prefix), "DELETE")

    def delete_all_keys(self) -> Result:
        return self._execute(build_url(self.host, KEYS_RESOURCE), "DELETE")

    def ping(self) -> Result:
        return self._execute(build_url(self.host, PING_RESOURCE))

    def _prefix_url(self, prefix: str) -> str:
        return build_url(build_url(self.host, KEYS_RESOURCE), prefix)

    def _execute(self, url, method=None, headers=None, body=None) -> Result:
        return self._executor.execute(url, method, headers, body, timeout=self._config.timeout)
