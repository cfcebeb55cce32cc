# Transfer codes are always below 100, so each one takes two decimal digits.
ERR_OFFSET = 100


def accumulate(current: int, new_code: int) -> int:
    if new_code == 0:
        return current
    if current == 0:
        return new_code
    return current * ERR_OFFSET + new_code


def to_string(combined: int) -> str:
    """Unpacks a composite code into "latest,...,first".

    Zero (or anything negative) means nothing was accumulated and decodes
    to an empty string.
    """
    codes = []
    while combined > 0:
        codes.append(str(combined % ERR_OFFSET))
        combined //= ERR_OFFSET
    return ",".join(codes)


class ErrorAccumulator:
    """Ordered record of the non-zero codes seen while configuring a transfer."""

    def __init__(self) -> None:
        self._codes: list[int] = []

    def add(self, code: int) -> int:
        if code != 0:
            self._codes.append(int(code))
        return code

    @property
    def codes(self) -> list[int]:
        return list(self._codes)

    @property
    def packed(self) -> int:
        combined = 0
        for code in self._codes:
            combined = accumulate(combined, code)
        return combined

    def __bool__(self) -> bool:
        return bool(self._codes)

    def __str__(self) -> str:
        return to_string(self.packed)
