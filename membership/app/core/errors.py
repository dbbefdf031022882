"""Domain errors raised by the services and rendered by the HTTP layer.

Each error carries the HTTP status the API answers with; the message is
returned verbatim in the ``err`` field of the error body.
"""


class MembershipError(Exception):
    """Base class for failures surfaced to API callers."""

    status_code: int = 400
    default_message: str = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class MissingParameterError(MembershipError):
    status_code = 401
    default_message = "Required parameter not provided!"


class NotFoundError(MembershipError):
    status_code = 404
    default_message = "No User with such id existing"


class ValidationFailureError(MembershipError):
    status_code = 401
    default_message = "Passwords doesn't match, What a shame!"


class DuplicateEmailError(ValidationFailureError):
    """Raised when an email is already registered.

    Answers 404 to stay compatible with existing clients.
    """

    status_code = 404
    default_message = "An account with that email already exists."


class RefereeMismatchError(MembershipError):
    """The acting referee is neither of the user's nominated referrers."""

    status_code = 403
    default_message = "Referee is not a nominated referrer of this user"


class ForbiddenError(MembershipError):
    status_code = 401
    default_message = "Not allowed to modify this user"


class InvalidTokenError(MembershipError):
    status_code = 401
    default_message = "Invalid Token!"


class InvalidCredentialsError(MembershipError):
    status_code = 401
    default_message = "Invalid email or password"


class PersistenceError(MembershipError):
    status_code = 500
    default_message = "Database operation failed"


class DispatchFailureError(MembershipError):
    status_code = 401
    default_message = "There was an error while sending the email."
