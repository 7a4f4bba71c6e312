"""Authentication schemas for JWT tokens, user context and acting users."""

from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from src.models.profile import TEAM_ROLES, UserRole


class UserContext(BaseModel):
    """Authenticated user context extracted from JWT token.

    This model represents the authenticated user for the current request.
    It is populated by the auth middleware from the validated JWT.
    """

    model_config = ConfigDict(from_attributes=True)

    user_id: UUID = Field(description="Unique identifier for the user (from JWT sub claim)")
    email: str | None = Field(default=None, description="User's email address if available")
    role: str | None = Field(default=None, description="Supabase auth role claim (e.g., 'authenticated')")


class Actor(BaseModel):
    """The user performing an operation, with their application role.

    Built from the JWT identity plus the role stored on the user's
    profile. Every service operation that is role or ownership gated
    receives one of these.
    """

    model_config = ConfigDict(from_attributes=True, frozen=True)

    user_id: UUID = Field(description="Auth user ID")
    role: UserRole = Field(default=UserRole.CLIENT, description="Application role")
    full_name: str | None = Field(default=None, description="Display name used as message sender")
    email: str | None = Field(default=None, description="Email address if known")

    @property
    def is_team(self) -> bool:
        """Check if the actor is a simplificador or superadmin."""
        return self.role in TEAM_ROLES

    @property
    def is_superadmin(self) -> bool:
        """Check if the actor is a superadmin."""
        return self.role == UserRole.SUPERADMIN


class TokenPayload(BaseModel):
    """JWT token payload structure for Supabase tokens.

    Represents the claims contained in a Supabase-issued JWT.
    Used for validation and extraction of user information.
    """

    model_config = ConfigDict(from_attributes=True)

    sub: str = Field(description="Subject - the user's UUID")
    email: str | None = Field(default=None, description="User's email address")
    role: str | None = Field(default=None, description="User's role")
    exp: int = Field(description="Expiration timestamp (Unix epoch)")
    iat: int = Field(description="Issued at timestamp (Unix epoch)")
    aud: str | None = Field(default=None, description="Audience - intended recipient")
    iss: str | None = Field(default=None, description="Issuer - token issuer URL")

    def to_user_context(self) -> UserContext:
        """Convert token payload to UserContext.

        Returns:
            UserContext: User context derived from token claims.
        """
        return UserContext(
            user_id=UUID(self.sub),
            email=self.email,
            role=self.role,
        )


class AuthenticatedResponse(BaseModel):
    """Response for the authenticated health check.

    Echoes the resolved actor so the frontend can route clients to the
    dashboard and team members to the board.
    """

    model_config = ConfigDict(from_attributes=True)

    authenticated: bool = Field(default=True, description="Authentication status")
    user_id: str = Field(description="Authenticated user ID")
    email: str | None = Field(default=None, description="User email if available")
    role: UserRole = Field(description="Application role")
