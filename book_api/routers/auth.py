from fastapi import APIRouter, Depends, Request
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users import exceptions
from sqlalchemy.exc import IntegrityError

from book_api.auth import BookApiJWTStrategy, UserManager, current_active_user, get_jwt_strategy, get_user_manager
from book_api.core.exceptions import InvalidCredentialsException, InvalidUserDataException, UserAlreadyExistsException
from book_api.core.logger_config import log_auth_info, log_auth_warning
from book_api.models.user import User
from book_api.schemas.user import AuthResponse, LoginRequest, RegisterRequest, UserRead

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=AuthResponse)
async def register(
    payload: RegisterRequest,
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
    strategy: BookApiJWTStrategy = Depends(get_jwt_strategy),
) -> AuthResponse:
    """
    Register a new user and return a bearer token for it.

    Raises:
        UserAlreadyExistsException: 409 if the email is already registered
        InvalidUserDataException: 400 if the password policy is not met
    """
    log_auth_info("Processing registration request", {"email": payload.email})
    try:
        user = await user_manager.create(payload, safe=True, request=request)
    except exceptions.UserAlreadyExists:
        log_auth_warning("Registration with an existing email", {"email": payload.email})
        raise UserAlreadyExistsException()
    except exceptions.InvalidPasswordException as e:
        raise InvalidUserDataException().with_details({"errors": e.reason})
    except IntegrityError:
        # Lost a race against a concurrent registration of the same email
        await user_manager.user_db.session.rollback()
        raise UserAlreadyExistsException()

    issued = strategy.issue(user)
    return AuthResponse(token=issued.token, email=user.email, expiration=issued.expires_at)


@router.post("/login", response_model=AuthResponse)
async def login(
    payload: LoginRequest,
    request: Request,
    user_manager: UserManager = Depends(get_user_manager),
    strategy: BookApiJWTStrategy = Depends(get_jwt_strategy),
) -> AuthResponse:
    """
    Exchange email and password for a bearer token.

    Unknown email, wrong password and inactive account all give the same 401.
    """
    credentials = OAuth2PasswordRequestForm(username=payload.email, password=payload.password)
    user = await user_manager.authenticate(credentials)
    if user is None or not user.is_active:
        log_auth_warning("Failed login attempt", {"email": payload.email})
        raise InvalidCredentialsException()

    await user_manager.on_after_login(user, request)
    issued = strategy.issue(user)
    return AuthResponse(token=issued.token, email=user.email, expiration=issued.expires_at)


@router.get("/me", response_model=UserRead)
async def get_current_user(user: User = Depends(current_active_user)) -> UserRead:
    """
    Profile of the authenticated user.
    """
    return UserRead.model_validate(user)
