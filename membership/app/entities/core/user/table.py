"""User database table model."""

from sqlmodel import Field

from membership.app.entities.core._base import EntityTable


class UserTable(EntityTable, table=True):
    """Database persistence model for users.

    This represents how the User entity is stored in the database.
    It's separate from the domain entity to maintain clean architecture
    while keeping related code together.
    """

    __tablename__ = "users"

    membership_id: str | None = Field(default=None, index=True)
    email: str = Field(unique=True, index=True)
    password: str

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

    role: str = Field(default="User")
    membership_status: str = Field(default="inactive")
    membership_fee: str = Field(default="unpaid")
    membership_plan: str | None = None

    referrer1: str | None = Field(default=None, index=True)
    referrer2: str | None = Field(default=None, index=True)
    referrer_member_id1: str | None = None
    referrer_member_id2: str | None = None
    referred1: bool = Field(default=False)
    referred2: bool = Field(default=False)
