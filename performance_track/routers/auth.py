"""Auth router - registration, login and the current-user dependencies."""
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import JWTError
from pydantic import BaseModel

from performance_track.database import get_database
from performance_track.models.user import CurrentUser, User, UserCreate, UserRegister, UserRole
from performance_track.services.auth_service import AuthService
from performance_track.utils.auth import verify_access_token


router = APIRouter(prefix="/auth", tags=["auth"])
security = HTTPBearer(auto_error=False)


class LoginRequest(BaseModel):
    """Login request model."""

    email: str
    password: str


class TokenResponse(BaseModel):
    """Token response model."""

    access_token: str
    token_type: str = "bearer"


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> CurrentUser:
    """
    Dependency to get the authenticated caller from the bearer token.

    Raises:
        HTTPException: If the token is missing or invalid (401)
    """
    if credentials is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
        )

    try:
        return verify_access_token(credentials.credentials)
    except JWTError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )


async def require_admin(
    current_user: CurrentUser = Depends(get_current_user),
) -> CurrentUser:
    """Dependency that only lets admins through."""
    if current_user.role != UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin access required",
        )
    return current_user


@router.post("/register", response_model=User, status_code=status.HTTP_201_CREATED)
async def register(user: UserRegister, db=Depends(get_database)):
    """
    Register a new employee account.

    - Email must be unique (400 otherwise)
    - The account is always an EMPLOYEE; elevated accounts come from /auth/users
    """
    service = AuthService(db)
    return await service.register_user(
        email=user.email,
        password=user.password,
        name=user.name,
        role=UserRole.EMPLOYEE,
    )


@router.post("/users", response_model=User, status_code=status.HTTP_201_CREATED)
async def create_user(
    user: UserCreate,
    current_user: CurrentUser = Depends(require_admin),
    db=Depends(get_database),
):
    """Create an account with any role (admins only)."""
    service = AuthService(db)
    return await service.register_user(
        email=user.email,
        password=user.password,
        name=user.name,
        role=user.role,
    )


@router.post("/login", response_model=TokenResponse)
async def login(login_req: LoginRequest, db=Depends(get_database)):
    """Login user and return an access token (401 on bad credentials)."""
    service = AuthService(db)
    token = await service.login(email=login_req.email, password=login_req.password)
    return TokenResponse(access_token=token)


@router.get("/me", response_model=User)
async def get_me(
    current_user: CurrentUser = Depends(get_current_user),
    db=Depends(get_database),
):
    """Get current authenticated user."""
    service = AuthService(db)
    return await service.get_user_by_id(current_user.id)
