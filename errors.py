"""
Custom exception classes for the 2FA service.
Each carries the HTTP status the API layer answers with.
"""

from typing import Any, Optional

from fastapi import status


class TotpServiceError(Exception):
    """Base exception for the 2FA service"""

    def __init__(self, message: str, status_code: int = 500, details: Optional[Any] = None):
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class ValidationError(TotpServiceError):
    """Seed is not a 64-character hex string"""

    def __init__(self, message: str = "Invalid seed", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_400_BAD_REQUEST,
            details=details,
        )


class CryptoError(TotpServiceError):
    """Bad key, malformed ciphertext or failed RSA decryption"""

    def __init__(self, message: str = "Decryption failed", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


class SeedNotFoundError(TotpServiceError):
    """No seed has been persisted yet"""

    def __init__(self, message: str = "Seed not decrypted yet", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )


class SeedRequestError(TotpServiceError):
    """Seed issuing API did not hand out an encrypted seed"""

    def __init__(self, message: str = "Seed request failed", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details=details,
        )


class SeedWriteError(TotpServiceError):
    """Decrypted seed could not be persisted"""

    def __init__(self, message: str = "Decryption failed", details: Optional[Any] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details=details,
        )
