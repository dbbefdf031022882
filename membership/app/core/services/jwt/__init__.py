"""JWT related services."""

from .jwt_gen import ACCESS_PURPOSE, PASSWORD_RESET_PURPOSE, JwtGeneratorService
from .jwt_verify import JwtVerificationService

__all__ = [
    "ACCESS_PURPOSE",
    "PASSWORD_RESET_PURPOSE",
    "JwtGeneratorService",
    "JwtVerificationService",
]
