"""User registration, profile and credential endpoints."""

from fastapi import APIRouter, Depends, File, UploadFile

from membership.app.api.http.deps import (
    get_current_claims,
    get_optional_claims,
    get_user_management_service,
)
from membership.app.api.http.middleware.limiter import rate_limit
from membership.app.core.models.claims import TokenClaims
from membership.app.core.models.user import (
    CamelModel,
    LoginResult,
    UserCreate,
    UserCreated,
    UserPublic,
    UserUpdate,
)
from membership.app.core.services import UserManagementService

router = APIRouter(tags=["user"])


class StatusMessage(CamelModel):
    status: str = "success"
    message: str


class UserIdRequest(CamelModel):
    id: str | None = None


class ForgotPasswordRequest(CamelModel):
    email: str | None = None
    url: str | None = None


class ChangePasswordRequest(CamelModel):
    password: str | None = None
    confirm_password: str | None = None


class LoginRequest(CamelModel):
    email: str | None = None
    password: str | None = None


class RefereeRequest(CamelModel):
    email: str | None = None


class AlertRefereeRequest(CamelModel):
    id: str | None = None
    referrer_url: str | None = None


class UploadResult(CamelModel):
    status: str = "success"
    banner_url: str


@router.post("/user", response_model=UserCreated, response_model_by_alias=True)
def create_user(
    payload: UserCreate,
    users: UserManagementService = Depends(get_user_management_service),
) -> UserCreated:
    return users.create(payload)


@router.put("/user", response_model=StatusMessage)
def update_user(
    payload: UserUpdate,
    claims: TokenClaims = Depends(get_current_claims),
    users: UserManagementService = Depends(get_user_management_service),
) -> StatusMessage:
    users.update(payload.id, payload, claims)
    return StatusMessage(message=f"User with id {payload.id} has been updated")


@router.delete("/user", response_model=StatusMessage)
def delete_user(
    payload: UserIdRequest,
    claims: TokenClaims = Depends(get_current_claims),
    users: UserManagementService = Depends(get_user_management_service),
) -> StatusMessage:
    users.delete(payload.id, claims)
    return StatusMessage(message=f"User with id {payload.id} has been deleted")


@router.get("/user/usercount")
def user_count(
    users: UserManagementService = Depends(get_user_management_service),
) -> str:
    return str(users.count())


@router.post("/user/login", response_model=LoginResult, dependencies=[Depends(rate_limit())])
def login(
    payload: LoginRequest,
    users: UserManagementService = Depends(get_user_management_service),
) -> LoginResult:
    return users.login(payload.email, payload.password)


@router.post("/user/upload", response_model=UploadResult, response_model_by_alias=True)
async def upload_file(
    file: UploadFile | None = File(default=None),
    users: UserManagementService = Depends(get_user_management_service),
) -> UploadResult:
    data = await file.read() if file is not None else b""
    url = users.upload_image(
        file.filename if file is not None else None,
        data,
        file.content_type if file is not None else None,
    )
    return UploadResult(banner_url=url)


@router.put("/user/change/{token}", response_model=StatusMessage)
def change_password(
    token: str,
    payload: ChangePasswordRequest,
    claims: TokenClaims | None = Depends(get_optional_claims),
    users: UserManagementService = Depends(get_user_management_service),
) -> StatusMessage:
    users.change_password(
        token,
        payload.password,
        payload.confirm_password,
        actor=claims.email if claims else None,
    )
    return StatusMessage(message="Password successfully changed.")


@router.put(
    "/user/{user_id}",
    response_model=StatusMessage,
    dependencies=[Depends(rate_limit())],
)
def forgot_password(
    user_id: str,
    payload: ForgotPasswordRequest,
    users: UserManagementService = Depends(get_user_management_service),
) -> StatusMessage:
    users.forgot_password(payload.email, payload.url)
    return StatusMessage(
        message="Click on the link sent to your email to change your password."
    )


@router.get("/user", response_model=list[UserPublic], response_model_by_alias=True)
def list_users(
    users: UserManagementService = Depends(get_user_management_service),
) -> list[UserPublic]:
    return [UserPublic.from_user(user) for user in users.list_users()]


@router.get("/user/{user_id}", response_model=UserPublic, response_model_by_alias=True)
def get_user(
    user_id: str,
    users: UserManagementService = Depends(get_user_management_service),
) -> UserPublic:
    return UserPublic.from_user(users.get(user_id))


@router.post("/validatereferee", response_model=StatusMessage)
def validate_referee(
    payload: RefereeRequest,
    users: UserManagementService = Depends(get_user_management_service),
) -> StatusMessage:
    users.validate_referee(payload.email)
    return StatusMessage(message="The referee is valid")


@router.post("/alertreferee", response_model=StatusMessage)
def alert_referee(
    payload: AlertRefereeRequest,
    users: UserManagementService = Depends(get_user_management_service),
) -> StatusMessage:
    users.alert_referees(payload.id, payload.referrer_url)
    return StatusMessage(message="The referees has been alerted.")
