"""
HOTP/TOTP code computation.

The counter is packed as 4 zero bytes followed by the time-step truncated
to 32 bits, so codes are only well defined for time-steps below 2**32
(unix time up to the year 2106). Secrets already provisioned depend on
this packing, do not widen it.
"""
import enum
import logging
import struct
import time
from typing import Optional, Union

from cryptography.hazmat.primitives import hashes, hmac
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from base32_codec import decode_blocks
from errors import ConfigurationError, DecodeFailure

logger = logging.getLogger(__name__)

PERIOD = 30
MIN_CODE_LENGTH = 6
DEFAULT_CODE_LENGTH = 6


class HashAlgorithm(str, enum.Enum):
    """HMAC hash functions an engine can use; values are the otpauth names."""

    SHA1 = "SHA1"
    SHA224 = "SHA224"
    SHA256 = "SHA256"
    SHA384 = "SHA384"
    SHA512 = "SHA512"
    SHA512_224 = "SHA512/224"
    SHA512_256 = "SHA512/256"
    SHA3_224 = "SHA3-224"
    SHA3_256 = "SHA3-256"
    SHA3_384 = "SHA3-384"
    SHA3_512 = "SHA3-512"


# Every digest here is at least 20 bytes: truncation reads up to byte 18
_HMAC_HASHES = {
    HashAlgorithm.SHA1: hashes.SHA1,
    HashAlgorithm.SHA224: hashes.SHA224,
    HashAlgorithm.SHA256: hashes.SHA256,
    HashAlgorithm.SHA384: hashes.SHA384,
    HashAlgorithm.SHA512: hashes.SHA512,
    HashAlgorithm.SHA512_224: hashes.SHA512_224,
    HashAlgorithm.SHA512_256: hashes.SHA512_256,
    HashAlgorithm.SHA3_224: hashes.SHA3_224,
    HashAlgorithm.SHA3_256: hashes.SHA3_256,
    HashAlgorithm.SHA3_384: hashes.SHA3_384,
    HashAlgorithm.SHA3_512: hashes.SHA3_512,
}

DEFAULT_ALGORITHM = HashAlgorithm.SHA256


class OTPConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    code_length: int = Field(default=DEFAULT_CODE_LENGTH, ge=MIN_CODE_LENGTH)
    algorithm: HashAlgorithm = DEFAULT_ALGORITHM

    @field_validator("algorithm", mode="before")
    @classmethod
    def normalise_algorithm_name(cls, value):
        if isinstance(value, str) and not isinstance(value, HashAlgorithm):
            return value.upper()
        return value


def parse_algorithm(value: Union[HashAlgorithm, str]) -> HashAlgorithm:
    """Resolve an algorithm member or its case-insensitive name."""
    try:
        return HashAlgorithm(value.upper() if isinstance(value, str) else value)
    except ValueError as e:
        raise ConfigurationError(f"Unsupported hash algorithm: {value!r}") from e


def time_step_for(unix_time: float) -> int:
    """
    Convert unix time to a TOTP time-step

    Args:
        unix_time: seconds since the epoch

    Returns:
        floor(unix_time / 30)
    """
    return int(unix_time // PERIOD)


def current_time_step(now: Optional[float] = None) -> int:
    """Time-step for `now` (unix seconds), defaulting to the current time."""
    if now is None:
        now = time.time()
    return time_step_for(now)


def seconds_remaining(now: Optional[float] = None) -> int:
    """Seconds until the current time-step rolls over."""
    if now is None:
        now = time.time()
    return int(PERIOD - (now % PERIOD))


def _pack_time_step(time_step: int) -> bytes:
    return struct.pack(">II", 0, time_step & 0xFFFFFFFF)


def _dynamic_truncate(mac: bytes) -> int:
    # Low nibble of the last byte is the offset of a 4-byte window
    offset = mac[-1] & 0x0F
    part = mac[offset:offset + 4]
    return struct.unpack(">I", part)[0] & 0x7FFFFFFF


class OTPEngine:
    """
    Computes fixed-length decimal codes from a base32 secret and a time-step.

    Configuration (code length and algorithm) is fixed at construction.
    With strict=False (the default) a secret that is not valid base32 is
    treated as an empty key, so verification against it just fails. With
    strict=True the DecodeFailure is raised to the caller instead.
    """

    def __init__(
        self,
        code_length: int = DEFAULT_CODE_LENGTH,
        algorithm: Union[HashAlgorithm, str] = DEFAULT_ALGORITHM,
        strict: bool = False,
    ):
        try:
            self._config = OTPConfig(code_length=code_length, algorithm=algorithm)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid OTP configuration: {e}") from e

        self._hash_cls = _HMAC_HASHES[self._config.algorithm]
        self._strict = strict

    @property
    def config(self) -> OTPConfig:
        return self._config

    @property
    def code_length(self) -> int:
        return self._config.code_length

    @property
    def algorithm(self) -> HashAlgorithm:
        return self._config.algorithm

    def _key_for(self, secret: str) -> bytes:
        try:
            return decode_blocks(secret)
        except DecodeFailure:
            if self._strict:
                raise
            logger.debug("Secret is not valid base32, using an empty key")
            return b""

    def compute_code(self, secret: str, time_step: Optional[int] = None) -> str:
        """
        Calculate the code for a secret at a time-step.

        Args:
            secret: base32 secret
            time_step: counter value (default: current time-step)

        Returns:
            Decimal code of exactly code_length digits
        """
        if time_step is None:
            time_step = current_time_step()

        # 1. Secret -> HMAC key
        key = self._key_for(secret)

        # 2. HMAC over the packed time-step
        h = hmac.HMAC(key, self._hash_cls())
        h.update(_pack_time_step(time_step))
        mac = h.finalize()

        # 3. Truncate and reduce to code_length digits
        value = _dynamic_truncate(mac) % (10 ** self.code_length)

        return str(value).zfill(self.code_length)

    def __repr__(self) -> str:
        return f"OTPEngine(code_length={self.code_length}, algorithm={self.algorithm.value})"
