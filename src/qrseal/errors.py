"""Custom exceptions for qrseal."""


class QrSealError(Exception):
    """Base exception for qrseal."""


class CryptoError(QrSealError):
    """Key derivation or authenticated encryption failed."""


class InvalidPassword(CryptoError):
    """Password is empty or outside the accepted length."""


class KeyDerivationFailed(CryptoError):
    """Argon2 could not derive a key (e.g. memory exhaustion)."""


class InvalidSalt(CryptoError):
    """Salt recovered from a record has the wrong length."""


class DecryptionFailed(CryptoError):
    """Wrong password or corrupted data.

    Both causes are reported through this single error on purpose.
    """


class CryptoUnavailable(CryptoError):
    """Cryptographic backend failed its start-up self-test."""


class CompressionError(QrSealError):
    """Compressor or decompressor rejected the data."""


class SerializationError(QrSealError):
    """Binary record does not match the expected structure."""


class TextDecodingError(QrSealError):
    """Transport string is not valid padded base64."""


class QrCodeError(QrSealError):
    """Base class for QR rendering and scanning problems."""


class QrGenerationError(QrCodeError):
    """QR code could not be rendered."""


class ImageReadError(QrCodeError):
    """Image file could not be opened or decoded."""


class QrCodeNotFound(QrCodeError):
    """No QR symbol was found in the image."""


class CapacityExceeded(QrCodeError):
    """Transport string is too long for a single QR code."""

    def __init__(self, length: int, limit: int) -> None:
        self.length = length
        self.limit = limit
        super().__init__(f"Encoded payload is {length} characters, QR limit is below {limit}")
