"""
User schemas for API request/response validation.
Covers registration, login, profile editing, privacy settings and the
public/private profile views.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from devfolio.models.user import MessagePermission, ProfileVisibility, UserRole
from devfolio.schemas.common import UTCDateTime


# ============================================================================
# Request Schemas
# ============================================================================

class RegisterRequest(BaseModel):
    """Schema for creating an account."""

    username: str = Field(..., min_length=3, max_length=30, description="Public handle")
    email: EmailStr = Field(..., description="Login email address")
    password: str = Field(..., min_length=6, max_length=128)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: str) -> str:
        return v.lower()

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "username": "ada",
                "email": "ada@example.com",
                "password": "correct-horse"
            }
        }
    )


class LoginRequest(BaseModel):
    """Schema for logging in. ``email`` also accepts a username."""

    email: str = Field(..., min_length=1, description="Email address or username")
    password: str = Field(..., min_length=1)


class ProfileUpdate(BaseModel):
    """Schema for editing one's own profile. Omitted fields are left unchanged."""

    username: Optional[str] = Field(None, min_length=3, max_length=30)
    email: Optional[EmailStr] = None
    avatar: Optional[str] = Field(None, max_length=500)
    bio: Optional[str] = Field(None, max_length=500)
    location: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=200)
    github: Optional[str] = Field(None, max_length=100)
    twitter: Optional[str] = Field(None, max_length=100)
    linkedin: Optional[str] = Field(None, max_length=100)

    @field_validator("username", mode="before")
    @classmethod
    def strip_username(cls, v):
        return v.strip() if isinstance(v, str) else v

    @field_validator("email")
    @classmethod
    def lower_email(cls, v: Optional[str]) -> Optional[str]:
        return v.lower() if v else v


class PasswordChange(BaseModel):
    """Schema for changing one's password."""

    current_password: str = Field(..., min_length=1)
    new_password: str = Field(..., min_length=6, max_length=128)


class PrivacyUpdate(BaseModel):
    """Schema for privacy and messaging settings."""

    profile_visibility: Optional[ProfileVisibility] = None
    show_email: Optional[bool] = None
    message_permission: Optional[MessagePermission] = None
    allow_messages: Optional[bool] = None


# ============================================================================
# Response Schemas
# ============================================================================

class UserSummary(BaseModel):
    """Minimal user card embedded in other resources."""

    id: str
    username: str
    avatar: str

    model_config = ConfigDict(from_attributes=True)


class UserPublicProfile(UserSummary):
    """A user's profile as seen by someone else."""

    bio: str = ""
    location: str = ""
    website: str = ""
    github: str = ""
    twitter: str = ""
    linkedin: str = ""
    reputation: int = 0
    is_verified: bool = False
    created_at: UTCDateTime
    email: Optional[str] = None

    followers_count: int = 0
    following_count: int = 0

    # Viewer-relative flags, false for anonymous viewers
    is_following: bool = False
    is_blocked: bool = False
    can_message: bool = False


class UserPrivateProfile(UserSummary):
    """A user's own profile including privacy settings."""

    email: str
    bio: str = ""
    location: str = ""
    website: str = ""
    github: str = ""
    twitter: str = ""
    linkedin: str = ""
    reputation: int = 0
    is_verified: bool = False
    role: UserRole
    profile_visibility: ProfileVisibility
    show_email: bool
    message_permission: MessagePermission
    allow_messages: bool
    created_at: UTCDateTime
    updated_at: UTCDateTime

    followers_count: int = 0
    following_count: int = 0


class AuthResponse(BaseModel):
    """Payload returned by register and login."""

    user: UserPrivateProfile
    token: str


class FollowStatus(BaseModel):
    """Follow/block state between the caller and a target user."""

    user_id: str
    is_following: bool
    is_blocked: bool
    followers_count: int
