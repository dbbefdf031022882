"""Referee confirmation endpoints."""

from fastapi import APIRouter, Depends

from membership.app.api.http.deps import get_referral_service
from membership.app.core.models.user import CamelModel, UserPublic
from membership.app.core.services import ReferralOutcome, ReferralService

router = APIRouter(tags=["referrer"])


class ReferralRequest(CamelModel):
    id: str | None = None
    referee_id: str | None = None


class ReferralResponse(CamelModel):
    status: str = "success"
    message: str
    referred1: bool
    referred2: bool
    fully_referred: bool
    changed: bool

    @classmethod
    def from_outcome(cls, outcome: ReferralOutcome) -> "ReferralResponse":
        return cls(
            message=outcome.message,
            referred1=outcome.referred1,
            referred2=outcome.referred2,
            fully_referred=outcome.fully_referred,
            changed=outcome.changed,
        )


@router.post("/referrer", response_model=ReferralResponse, response_model_by_alias=True)
def confirm_referral(
    payload: ReferralRequest,
    referrals: ReferralService = Depends(get_referral_service),
) -> ReferralResponse:
    """Referee confirms the applicant."""
    return ReferralResponse.from_outcome(referrals.confirm(payload.id, payload.referee_id))


@router.delete("/referrer", response_model=ReferralResponse, response_model_by_alias=True)
def reject_referral(
    payload: ReferralRequest,
    referrals: ReferralService = Depends(get_referral_service),
) -> ReferralResponse:
    """Referee rejects the applicant."""
    return ReferralResponse.from_outcome(referrals.reject(payload.id, payload.referee_id))


@router.get(
    "/social/referrer",
    response_model=list[UserPublic],
    response_model_by_alias=True,
)
def list_pending(
    referrals: ReferralService = Depends(get_referral_service),
) -> list[UserPublic]:
    """Users still waiting on a referee."""
    return [UserPublic.from_user(user) for user in referrals.list_pending()]


@router.get(
    "/social/referrer/{user_id}",
    response_model=UserPublic,
    response_model_by_alias=True,
)
def get_pending(
    user_id: str,
    referrals: ReferralService = Depends(get_referral_service),
) -> UserPublic:
    return UserPublic.from_user(referrals.list_pending(user_id))
