import logging
import secrets
from typing import Callable, Optional, Sequence, Tuple

from base32_codec import ALPHABET
from errors import RandomnessUnavailable, SecretRangeError

logger = logging.getLogger(__name__)

# Valid secret lengths are 80 to 640 bits
MIN_SECRET_LENGTH = 16
MAX_SECRET_LENGTH = 128
DEFAULT_SECRET_LENGTH = 32

# A source returns (random bytes, whether the bytes are cryptographically strong)
EntropySource = Callable[[int], Tuple[bytes, bool]]


def system_entropy(length: int) -> Tuple[bytes, bool]:
    """Read from the operating system CSPRNG."""
    return secrets.token_bytes(length), True


def _read_strong_bytes(length: int, sources: Sequence[EntropySource]) -> bytes:
    for source in sources:
        name = getattr(source, "__name__", repr(source))
        try:
            data, strong = source(length)
        except (NotImplementedError, OSError) as e:
            logger.warning("Entropy source %s unavailable: %s", name, e)
            continue

        if not strong:
            logger.warning("Entropy source %s did not report strong output", name)
            continue
        if len(data) != length:
            logger.warning("Entropy source %s returned %d bytes, expected %d", name, len(data), length)
            continue

        return data

    raise RandomnessUnavailable("No source of secure random")


def create_secret(length: int = DEFAULT_SECRET_LENGTH, sources: Optional[Sequence[EntropySource]] = None) -> str:
    """
    Create a new random base32 secret.

    Args:
        length: number of base32 characters, 16..128
        sources: entropy sources tried in order (default: OS CSPRNG only)

    Returns:
        Secret string of exactly `length` characters from A-Z2-7

    Raises:
        SecretRangeError: length not an integer, or outside 16..128
        RandomnessUnavailable: no source produced strong random bytes
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise SecretRangeError(f"The secret length must be an integer, got {length!r}")
    if length < MIN_SECRET_LENGTH:
        raise SecretRangeError("The secret is too short")
    if length > MAX_SECRET_LENGTH:
        raise SecretRangeError("The secret is too long")

    if sources is None:
        sources = (system_entropy,)

    rnd = _read_strong_bytes(length, sources)

    # Low 5 bits of every byte pick one alphabet symbol
    return "".join(ALPHABET[byte & 0x1F] for byte in rnd)
