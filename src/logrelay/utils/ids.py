import random
import time
import uuid

FALLBACK_PREFIX = "logrelay"

_ALPHABET = "0123456789abcdefghijklmnopqrstuvwxyz"


def _to_base36(number: int) -> str:
    if number == 0:
        return "0"
    digits = []
    while number:
        number, rem = divmod(number, 36)
        digits.append(_ALPHABET[rem])
    return "".join(reversed(digits))


def generate_log_id() -> str:
    """
    Return a collision-resistant identifier for a log entry.

    uuid4 draws from os.urandom(); on platforms without an OS randomness source
    that raises NotImplementedError and we fall back to "<prefix>-<ms base36>-<random>".
    """
    try:
        return uuid.uuid4().hex
    except NotImplementedError:
        millis = _to_base36(int(time.time() * 1000))
        suffix = "".join(random.choice(_ALPHABET) for _ in range(8))
        return f"{FALLBACK_PREFIX}-{millis}-{suffix}"


__all__ = ["generate_log_id", "FALLBACK_PREFIX"]
