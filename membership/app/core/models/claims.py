from typing import Any

from pydantic import BaseModel, Field


class TokenClaims(BaseModel):
    """Structured representation of JWT token claims."""

    raw_token: str = Field(default="", description="Original JWT token")

    issuer: str = Field(description="Issuer")
    subject: str = Field(description="Subject (user ID)")
    audience: str | list[str] = Field(description="Audience")
    expires_at: int = Field(description="Expiration time")
    issued_at: int = Field(description="Issued at")
    jti: str | None = Field(default=None, description="JWT ID (unique token identifier)")

    email: str | None = Field(default=None, description="Email address")
    roles: list[str] = Field(default_factory=list, description="User roles")
    purpose: str = Field(default="access", description="What the token may be used for")

    custom_claims: dict[str, Any] = Field(
        default_factory=dict, description="Custom or additional claims"
    )

    @classmethod
    def from_jwt_payload(
        cls, payload: dict[str, Any], raw_token: str = ""
    ) -> "TokenClaims":
        """Create TokenClaims from JWT payload dictionary."""
        claim_mapping = {
            "iss": "issuer",
            "sub": "subject",
            "aud": "audience",
            "exp": "expires_at",
            "iat": "issued_at",
            "jti": "jti",
            "email": "email",
            "roles": "roles",
            "purpose": "purpose",
        }
        registered = {"nbf"}

        data: dict[str, Any] = {"raw_token": raw_token}
        custom: dict[str, Any] = {}
        for key, value in payload.items():
            if key in claim_mapping:
                data[claim_mapping[key]] = value
            elif key not in registered:
                custom[key] = value
        data["custom_claims"] = custom
        return cls.model_validate(data)

    @property
    def is_admin(self) -> bool:
        return "Admin" in self.roles
