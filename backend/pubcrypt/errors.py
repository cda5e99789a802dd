class PubcryptError(Exception):
    """Base class for every error raised by pubcrypt."""


class PrimeError(PubcryptError):
    """Prime search failed."""


class InvalidRangeError(PrimeError, ValueError):
    """The requested range cannot contain a prime the search supports."""


class PrimeNotFoundError(PrimeError):
    """Search attempts were exhausted without finding a prime."""


class FormatError(PubcryptError, ValueError):
    """Malformed key or ciphertext data."""


class DecodeError(FormatError):
    """Ciphertext decrypted to something that is not a valid plaintext block."""
