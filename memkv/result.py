from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class Success:
    body: str

    @property
    def success(self) -> bool:
        return True


@dataclass(frozen=True)
class Failure:
    error: str

    @property
    def success(self) -> bool:
        return False


# A request ends in exactly one of these. Match on the type (or check
# `.success`) before reading `.body` or `.error`.
Result: TypeAlias = Success | Failure
