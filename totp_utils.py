from typing import Optional, Union

from otp_engine import DEFAULT_ALGORITHM, HashAlgorithm, OTPEngine, current_time_step
from secret_generator import DEFAULT_SECRET_LENGTH, create_secret
from verifier import Verifier


def new_secret(length: int = DEFAULT_SECRET_LENGTH) -> str:
    """
    Generate a new base32 secret

    Args:
        length: number of base32 characters (16..128)

    Returns:
        Secret string for the user's authenticator app
    """
    return create_secret(length)


def generate_totp_code(
    secret: str,
    algorithm: Union[HashAlgorithm, str] = DEFAULT_ALGORITHM,
    digits: int = 6,
    for_time: Optional[float] = None,
) -> str:
    """
    Generate TOTP code from base32 secret

    Args:
        secret: base32 secret
        algorithm: HMAC hash algorithm (default SHA256)
        digits: code length, at least 6
        for_time: unix time to generate for (default: now)

    Returns:
        Zero-padded TOTP code as string
    """
    engine = OTPEngine(code_length=digits, algorithm=algorithm)

    return engine.compute_code(secret, current_time_step(for_time))


def verify_totp_code(
    secret: str,
    code: str,
    valid_window: int = 1,
    algorithm: Union[HashAlgorithm, str] = DEFAULT_ALGORITHM,
    digits: int = 6,
    for_time: Optional[float] = None,
) -> bool:
    """
    Verify TOTP code with time window tolerance

    Args:
        secret: base32 secret
        code: code to verify
        valid_window: number of periods before/after to accept (default 1 = ±30s)
        algorithm: HMAC hash algorithm (default SHA256)
        digits: code length, at least 6
        for_time: unix time to verify against (default: now)

    Returns:
        True if code is valid, False otherwise
    """
    verifier = Verifier(OTPEngine(code_length=digits, algorithm=algorithm))

    return verifier.verify_code(secret, code, discrepancy=valid_window, reference_time_step=current_time_step(for_time))
