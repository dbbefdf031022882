"""User domain entity."""

from enum import StrEnum

from pydantic import Field

from membership.app.entities.core._base import Entity


class Role(StrEnum):
    USER = "User"
    ADMIN = "Admin"


class MembershipStatus(StrEnum):
    INACTIVE = "inactive"
    ACTIVE = "active"


class MembershipFee(StrEnum):
    UNPAID = "unpaid"
    PAID = "paid"


class User(Entity):
    """A member (or membership applicant) of the registry.

    ``referrer1``/``referrer2`` identify the two referees nominated at
    registration; ``referred1``/``referred2`` record whether each of them has
    confirmed the applicant.
    """

    membership_id: str | None = Field(default=None, description="Membership identifier")
    email: str = Field(description="Login email, unique across users")
    password: str = Field(description="bcrypt password hash")

    biz_nature: str | None = Field(default=None, description="Nature of business")
    company: str | None = Field(default=None, description="Company name")
    company_coi_url: str | None = Field(
        default=None, description="Certificate of incorporation document URL"
    )
    phone: str | None = Field(default=None, description="Company phone number")
    address: str | None = Field(default=None, description="Business address")
    trade_group: str | None = Field(default=None)
    annual_return: str | None = Field(default=None)
    annual_profit: str | None = Field(default=None)
    employees: str | None = Field(default=None)

    company_rep_name1: str | None = Field(default=None)
    company_rep_phone1: str | None = Field(default=None)
    company_rep_email1: str | None = Field(default=None)
    company_rep_passport_url1: str | None = Field(default=None)
    company_rep_cv_url1: str | None = Field(default=None)
    company_rep_name2: str | None = Field(default=None)
    company_rep_phone2: str | None = Field(default=None)
    company_rep_email2: str | None = Field(default=None)
    company_rep_passport_url2: str | None = Field(default=None)
    company_rep_cv_url2: str | None = Field(default=None)

    profile_image: str | None = Field(default=None, description="Profile image URL")

    role: Role = Field(default=Role.USER)
    membership_status: MembershipStatus = Field(default=MembershipStatus.INACTIVE)
    membership_fee: MembershipFee = Field(default=MembershipFee.UNPAID)
    membership_plan: str | None = Field(default=None)

    referrer1: str | None = Field(default=None, description="First referee identifier")
    referrer2: str | None = Field(default=None, description="Second referee identifier")
    referrer_member_id1: str | None = Field(default=None)
    referrer_member_id2: str | None = Field(default=None)
    referred1: bool = Field(default=False, description="First referee confirmed")
    referred2: bool = Field(default=False, description="Second referee confirmed")

    @property
    def fully_referred(self) -> bool:
        """Both referees have confirmed the applicant."""
        return self.referred1 and self.referred2

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN
