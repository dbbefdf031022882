from .referral_service import ReferralOutcome, ReferralService, outcome_message, resolve_slot

__all__ = ["ReferralOutcome", "ReferralService", "outcome_message", "resolve_slot"]
