"""
otpauth:// provisioning URIs and QR-code image URLs for authenticator apps.

Nothing here is cryptographic; the QR image itself is rendered by an
external service, this module only builds the URL pointing at it.
"""
from typing import Optional, Union

import requests
from pydantic import BaseModel, field_validator

from otp_engine import DEFAULT_ALGORITHM, HashAlgorithm, parse_algorithm

QR_SERVICE_URL = "https://api.qrserver.com/v1/create-qr-code/"

DEFAULT_QR_SIZE = 200
DEFAULT_ECC = "M"
ECC_LEVELS = ("L", "M", "Q", "H")


class QRCodeOptions(BaseModel):
    """Image parameters; invalid values fall back to the defaults."""

    width: int = DEFAULT_QR_SIZE
    height: int = DEFAULT_QR_SIZE
    ecc: str = DEFAULT_ECC

    @field_validator("width", "height", mode="before")
    @classmethod
    def positive_size(cls, value):
        try:
            size = int(value)
        except (TypeError, ValueError):
            return DEFAULT_QR_SIZE
        return size if size > 0 else DEFAULT_QR_SIZE

    @field_validator("ecc", mode="before")
    @classmethod
    def known_ecc_level(cls, value):
        return value if value in ECC_LEVELS else DEFAULT_ECC

    @property
    def size(self) -> str:
        return f"{self.width}x{self.height}"


def build_otpauth_uri(
    secret: str,
    label: str,
    issuer: Optional[str] = None,
    algorithm: Union[HashAlgorithm, str] = DEFAULT_ALGORITHM,
) -> str:
    """
    Build the otpauth://totp/ URI understood by authenticator apps.

    The algorithm parameter is left out for SHA1, which apps assume by default.
    """
    algorithm = parse_algorithm(algorithm)

    uri = "otpauth://totp/"
    if issuer is not None:
        uri += f"{issuer}:"
    uri += f"{label}?secret={secret}"

    if algorithm is not HashAlgorithm.SHA1:
        uri += f"&algorithm={algorithm.value}"
    if issuer is not None:
        uri += f"&issuer={issuer}"

    return uri


def qr_code_url(
    secret: str,
    label: str,
    issuer: Optional[str] = None,
    algorithm: Union[HashAlgorithm, str] = DEFAULT_ALGORITHM,
    options: Optional[QRCodeOptions] = None,
) -> str:
    """
    URL of a QR-code image encoding the provisioning URI.

    Args:
        secret: base32 secret
        label: account label, e.g. an e-mail address
        issuer: optional issuer (company / service) name
        algorithm: hash algorithm the engine uses
        options: image size and error correction level

    Returns:
        URL for the QR rendering service, with URL-encoded query parameters
    """
    if options is None:
        options = QRCodeOptions()

    params = [
        ("data", build_otpauth_uri(secret, label, issuer, algorithm)),
        ("size", options.size),
        ("ecc", options.ecc),
    ]

    # requests handles the query encoding; nothing is sent
    return requests.Request("GET", QR_SERVICE_URL, params=params).prepare().url
