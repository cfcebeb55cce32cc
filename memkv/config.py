import os

from dataclasses import dataclass

from .errors import ConfigError


DEFAULT_HOST = "http://localhost:8080"


@dataclass(frozen=True)
class ClientConfig:
    host: str = DEFAULT_HOST
    timeout: float | None = None
    max_body_bytes: int | None = None

    def __post_init__(self) -> None:
        if not self.host:
            raise ConfigError("Client host must not be empty.")
        if self.timeout is not None and self.timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {self.timeout}.")
        if self.max_body_bytes is not None and self.max_body_bytes < 0:
            raise ConfigError(f"max_body_bytes must not be negative, got {self.max_body_bytes}.")

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> "ClientConfig":
        """Builds a config from MEMKV_HOST, MEMKV_TIMEOUT and MEMKV_MAX_BODY_BYTES."""
        env = os.environ if environ is None else environ

        timeout = env.get("MEMKV_TIMEOUT") or None
        max_body_bytes = env.get("MEMKV_MAX_BODY_BYTES") or None
        try:
            return cls(
                host=env.get("MEMKV_HOST") or DEFAULT_HOST,
                timeout=float(timeout) if timeout is not None else None,
                max_body_bytes=int(max_body_bytes) if max_body_bytes is not None else None,
            )
        except ValueError as e:
            raise ConfigError(f"Invalid memkv environment setting: {e}") from e
