from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jwt import PyJWTError
from sqlalchemy.orm import Session

from odontoforense.auth import jwt_handler
from odontoforense.core.config import Settings, get_settings
from odontoforense.database import get_db
from odontoforense.models.user import Role, User

security = HTTPBearer(auto_error=False)

ALL_ROLES = (Role.ADMIN, Role.PERITO, Role.ASSISTENTE)
EXAMINERS = (Role.ADMIN, Role.PERITO)
ADMIN_ONLY = (Role.ADMIN,)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    settings: Settings = Depends(get_settings),
    db: Session = Depends(get_db),
) -> User:
    if credentials is None or not credentials.credentials:
        raise _unauthorized("Authentication token is required")

    try:
        payload = jwt_handler.decode_access_token(settings, credentials.credentials)
    except PyJWTError as exc:
        raise _unauthorized("Invalid token") from exc

    subject = payload.get("sub")
    if not subject or not str(subject).isdecimal():
        raise _unauthorized("Invalid token subject")

    user = db.get(User, int(subject))
    if user is None:
        raise _unauthorized("User not found")
    return user


def require_roles(*roles: Role):
    allowed = {role.value for role in roles}

    def check_role(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in allowed:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Access denied for this role",
            )
        return current_user

    return check_role
