import time
from typing import Any

from authlib.common.security import generate_token
from authlib.jose import JoseError, jwt
from loguru import logger

from membership.app.runtime.config.config_data import ConfigData
from membership.app.runtime.context import get_config

PASSWORD_RESET_PURPOSE = "password_reset"
ACCESS_PURPOSE = "access"

_RESERVED_CLAIMS = {"iss", "sub", "aud", "exp", "iat", "nbf", "jti"}


class JwtGeneratorService:
    """Service for generating signed JWTs (access and password-reset tokens)."""

    def generate_jwt(
        self,
        subject: str,
        claims: dict[str, Any] | None = None,
        expires_in_seconds: int = 3600,
        issuer: str | None = None,
        audience: str | list[str] | None = None,
        algorithm: str = "HS256",
        include_jti: bool = True,
        secret: str | None = None,
    ) -> str:
        """Generate a signed JWT using authlib.

        Args:
            subject: Subject (sub) claim - typically user ID
            claims: Additional claims to include in the token
            expires_in_seconds: Token lifetime in seconds (default: 1 hour)
            issuer: Issuer (iss) claim (defaults to config issuer)
            audience: Audience (aud) claim (defaults to config audiences)
            algorithm: Signing algorithm (default: HS256)
            include_jti: Whether to include a unique JWT ID claim (default: True)
            secret: Optional secret key for signing. If None, will use config secret.

        Returns:
            Signed JWT token string

        Raises:
            RuntimeError: If the signing secret or algorithm is not usable
        """
        config: ConfigData = get_config()

        secret = secret or config.app.signing_secret
        if not secret:
            raise RuntimeError("JWT signing secret not configured")

        if algorithm not in config.jwt.allowed_algorithms:
            logger.debug(
                f"Attempted to use disallowed algorithm: {algorithm}, only {config.jwt.allowed_algorithms} are allowed"
            )
            raise RuntimeError(f"Algorithm {algorithm} not allowed")

        now = int(time.time())
        payload: dict[str, Any] = {
            "iss": issuer or config.jwt.gen_issuer,
            "sub": subject,
            "aud": audience or config.jwt.audiences,
            "exp": now + expires_in_seconds,
            "iat": now,
            "nbf": now,
        }

        if include_jti:
            payload["jti"] = generate_token(16)

        if claims:
            payload.update({k: v for k, v in claims.items() if k not in _RESERVED_CLAIMS})

        try:
            token = jwt.encode({"alg": algorithm, "typ": "JWT"}, payload, secret)
        except JoseError as e:
            raise RuntimeError(f"JWT encoding failed: {e}") from e

        return token.decode() if isinstance(token, bytes) else token

    def generate_access_token(
        self,
        user_id: str,
        email: str,
        roles: list[str] | None = None,
        expires_in_seconds: int | None = None,
        **extra_claims,
    ) -> str:
        """Generate the bearer token handed out on login.

        Example:
            token = generate_access_token(
                user_id="9c1e...",
                email="member@example.com",
                roles=["User"],
            )
        """
        claims: dict[str, Any] = {
            "email": email,
            "roles": roles or [],
            "purpose": ACCESS_PURPOSE,
        }
        claims.update(extra_claims)

        return self.generate_jwt(
            subject=user_id,
            claims=claims,
            expires_in_seconds=expires_in_seconds
            or get_config().jwt.access_token_ttl_seconds,
        )

    def generate_reset_token(self, user_id: str, email: str, fingerprint: str) -> str:
        """Generate a time-stamped password reset token.

        ``fingerprint`` binds the token to the password hash current at
        issue time.
        """
        return self.generate_jwt(
            subject=user_id,
            claims={
                "email": email,
                "pwd": fingerprint,
                "purpose": PASSWORD_RESET_PURPOSE,
            },
            expires_in_seconds=get_config().security.reset_token_ttl_seconds,
        )
