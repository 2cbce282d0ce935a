class AuthenticatorError(Exception):
    """Base class for every error raised by the authenticator modules."""


class ConfigurationError(AuthenticatorError, ValueError):
    """Invalid code length or unsupported hash algorithm for an engine."""


class SecretRangeError(AuthenticatorError, ValueError):
    """Requested secret length is outside 16..128 characters."""


class RandomnessUnavailable(AuthenticatorError, RuntimeError):
    """No cryptographically strong entropy source could be used."""


class DecodeFailure(AuthenticatorError, ValueError):
    """Text is not valid base32."""
