import logging
from typing import Optional, Union

from otp_engine import OTPEngine, current_time_step

logger = logging.getLogger(__name__)


def _as_bytes(value: Union[str, bytes]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def timing_safe_equals(expected: Union[str, bytes], candidate: Union[str, bytes]) -> bool:
    """
    Compare two values without leaking where they first differ.

    Args:
        expected: the internal (safe) value
        candidate: the user submitted value

    Returns:
        True if both have the same length and identical bytes
    """
    expected_bytes = _as_bytes(expected)
    candidate_bytes = _as_bytes(candidate)

    if len(expected_bytes) != len(candidate_bytes):
        return False

    result = 0
    for x, y in zip(expected_bytes, candidate_bytes):
        result |= x ^ y

    # Identical only if no bit differed anywhere
    return result == 0


class Verifier:
    """Checks candidate codes against a window of time-steps."""

    def __init__(self, engine: OTPEngine):
        self.engine = engine

    def verify_code(
        self,
        secret: str,
        code: str,
        discrepancy: int = 1,
        reference_time_step: Optional[int] = None,
    ) -> bool:
        """
        Verify a code, accepting drift of `discrepancy` time-steps either way.

        Args:
            secret: base32 secret
            code: candidate code, compared as-is (no trimming)
            discrepancy: allowed drift in 30 second units (1 = +/-30s); negative rejects every code
            reference_time_step: time-step to check around (default: now)

        Returns:
            True if the code matches any time-step in the window
        """
        if len(code) != self.engine.code_length:
            return False

        if reference_time_step is None:
            reference_time_step = current_time_step()

        for offset in range(-discrepancy, discrepancy + 1):
            expected = self.engine.compute_code(secret, reference_time_step + offset)
            if timing_safe_equals(expected, code):
                logger.debug("Code accepted at offset %d", offset)
                return True

        logger.debug("Code rejected within +/-%d time-steps", discrepancy)
        return False
