"""Request and response shapes for user operations.

Field names are snake_case; JSON uses camelCase aliases
(``confirmPassword``, ``companyRepName1``) and both spellings are accepted.
"""

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from membership.app.entities.core.user.entity import (
    MembershipFee,
    MembershipStatus,
    Role,
    User,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UserProfileFields(CamelModel):
    """Company profile fields a member may edit."""

    biz_nature: str | None = None
    company: str | None = None
    company_coi_url: str | None = None
    phone: str | None = None
    address: str | None = None
    trade_group: str | None = None
    annual_return: str | None = None
    annual_profit: str | None = None
    employees: str | None = None
    company_rep_name1: str | None = None
    company_rep_phone1: str | None = None
    company_rep_email1: str | None = None
    company_rep_passport_url1: str | None = None
    company_rep_cv_url1: str | None = None
    company_rep_name2: str | None = None
    company_rep_phone2: str | None = None
    company_rep_email2: str | None = None
    company_rep_passport_url2: str | None = None
    company_rep_cv_url2: str | None = None
    profile_image: str | None = None
    membership_plan: str | None = None


class UserCreate(UserProfileFields):
    email: str = Field(min_length=3)
    password: str
    confirm_password: str
    referrer1: str | None = None
    referrer2: str | None = None
    referrer_member_id1: str | None = None
    referrer_member_id2: str | None = None


class UserUpdate(UserProfileFields):
    """Partial update; only fields present in the request are applied."""

    id: str | None = None
    email: str | None = None
    password: str | None = None
    confirm_password: str | None = None
    role: Role | None = None
    membership_status: MembershipStatus | None = None
    membership_fee: MembershipFee | None = None


class UserPublic(UserProfileFields):
    """A user as returned by the API; never carries the password."""

    id: str
    membership_id: str | None = None
    email: str
    role: Role
    membership_status: MembershipStatus
    membership_fee: MembershipFee
    referrer1: str | None = None
    referrer2: str | None = None
    referrer_member_id1: str | None = None
    referrer_member_id2: str | None = None
    referred1: bool = False
    referred2: bool = False

    @classmethod
    def from_user(cls, user: User) -> "UserPublic":
        return cls.model_validate(user.model_dump(exclude={"password"}))


class UserCreated(CamelModel):
    email: str
    id: str
    role: Role


class LoginResult(CamelModel):
    token: str
    id: str
    email: str
    role: Role
