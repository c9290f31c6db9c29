import jwt
from datetime import datetime, timedelta, timezone
from jwt.exceptions import InvalidTokenError

from fastapi import Depends, Header, status, HTTPException
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.core.exceptions import FunctionError
from app.db.database import get_db
from app.models.user_models import User
from app.models.user_role_models import AppRole
from app.services.access_policy import has_role


# HTTPBearer for extracting Bearer token from Authorization header
http_bearer = HTTPBearer(auto_error=False)

settings = get_settings()
SECRET_KEY = settings.secret_key
ALGORITHM = settings.algorithm
ACCESS_TOKEN_EXPIRE_MINUTES = settings.access_token_expire_minutes

if not SECRET_KEY:
    raise RuntimeError("SECRET_KEY is missing in .env")


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    to_encode = data.copy()

    expire = datetime.now(timezone.utc) + (
        expires_delta if expires_delta else timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    )

    to_encode.update({
        "exp": expire,
        "iat": datetime.now(timezone.utc),
    })

    return jwt.encode(to_encode, SECRET_KEY, algorithm=ALGORITHM)


def create_user_access_token(user: User) -> str:
    return create_access_token(
        data={
            "user_id": user.id,
            "token_version": user.token_version,
            "type": "access",
        },
        expires_delta=timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def verify_access_token(token: str, credentials_exception: Exception) -> dict:
    try:
        return jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except InvalidTokenError:
        raise credentials_exception


def _get_bearer_token(
    credentials: HTTPAuthorizationCredentials | None,
    credentials_exception: Exception
) -> str:
    if not credentials or not credentials.scheme or credentials.scheme.lower() != "bearer":
        raise credentials_exception
    token = credentials.credentials
    if not token:
        raise credentials_exception
    return token


def _user_from_token(token: str, db: Session, credentials_exception: Exception) -> User:
    payload = verify_access_token(token, credentials_exception)

    if payload.get("type") != "access":
        raise credentials_exception

    user_id = payload.get("user_id")
    if not user_id:
        raise credentials_exception

    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise credentials_exception

    # logout bumps token_version, revoking every token issued before it
    token_ver = payload.get("token_version")
    if token_ver is None or token_ver != user.token_version:
        raise credentials_exception

    return user


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(http_bearer),
    db: Session = Depends(get_db)
) -> User:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )

    token = _get_bearer_token(credentials, credentials_exception)
    return _user_from_token(token, db, credentials_exception)


def get_current_admin(
    user: User = Depends(get_current_user),
    db: Session = Depends(get_db)
) -> User:
    if not has_role(db, user.id, AppRole.admin):
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin role required")
    return user


def get_function_admin(
    authorization: str | None = Header(None),
    db: Session = Depends(get_db)
) -> User:
    """Admin check for the function endpoints, which answer with ``{"error"}`` bodies."""
    if not authorization:
        raise FunctionError("No authorization header")

    unauthorized = FunctionError("Unauthorized")
    # any other scheme is a token that fails lookup
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        raise unauthorized
    token = token.strip()
    user = _user_from_token(token, db, unauthorized)

    if not has_role(db, user.id, AppRole.admin):
        raise FunctionError("Forbidden: admin role required", status_code=status.HTTP_403_FORBIDDEN)
    return user
