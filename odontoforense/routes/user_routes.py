from datetime import datetime

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.orm import Session

from odontoforense import crud
from odontoforense.auth import jwt_handler
from odontoforense.auth.dependencies import ADMIN_ONLY, ALL_ROLES, require_roles
from odontoforense.core.config import Settings, get_settings
from odontoforense.core.errors import DuplicateRecord
from odontoforense.core.validation import normalize_required_text
from odontoforense.database import get_db
from odontoforense.models.user import Role, User

router = APIRouter(tags=['user'])

MIN_PASSWORD_LENGTH = 6


def normalize_email(value: str) -> str:
    normalized = value.strip().lower()
    if '@' not in normalized or normalized.startswith('@') or normalized.endswith('@'):
        raise ValueError('A valid email is required.')
    return normalized


def check_password_length(value: str) -> str:
    if len(value) < MIN_PASSWORD_LENGTH:
        raise ValueError(f'Password must be at least {MIN_PASSWORD_LENGTH} characters.')
    return value


class UserCreateRequest(BaseModel):
    name: str
    email: str
    password: str
    role: Role = Role.ASSISTENTE

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str) -> str:
        return normalize_required_text(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str) -> str:
        return check_password_length(value)


class UserUpdateRequest(BaseModel):
    name: str | None = None
    email: str | None = None
    password: str | None = None
    role: Role | None = None

    @field_validator('name')
    @classmethod
    def validate_name(cls, value: str | None) -> str | None:
        return normalize_required_text(value)

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str | None) -> str | None:
        return None if value is None else normalize_email(value)

    @field_validator('password')
    @classmethod
    def validate_password(cls, value: str | None) -> str | None:
        return None if value is None else check_password_length(value)


class UserResponse(BaseModel):
    id: int
    name: str
    email: str
    role: str
    created_at: datetime | None = None

    class Config:
        from_attributes = True


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def validate_email(cls, value: str) -> str:
        return value.strip().lower()


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = 'bearer'
    user: UserResponse


def ensure_email_available(db: Session, email: str, current_id: int | None = None) -> None:
    existing = db.query(User).filter(User.email == email).first()
    if existing is not None and existing.id != current_id:
        raise DuplicateRecord(f"Email '{email}' is already registered.")


@router.post('/login', response_model=TokenResponse)
def login(
    data: LoginRequest,
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    user = db.query(User).filter(User.email == data.email).first()
    if user is None or not jwt_handler.verify_password(data.password, user.hashed_password):
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail='Invalid email or password')

    token = jwt_handler.create_access_token(settings, subject=str(user.id), role=user.role)
    return TokenResponse(access_token=token, user=UserResponse.model_validate(user))


@router.get('/me', response_model=UserResponse)
def me(current_user: User = Depends(require_roles(*ALL_ROLES))):
    return current_user


@router.post('', response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user(
    data: UserCreateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ONLY)),
):
    ensure_email_available(db, data.email)
    return crud.create_record(db, User, {
        'name': data.name,
        'email': data.email,
        'hashed_password': jwt_handler.hash_password(data.password),
        'role': data.role.value,
    })


@router.get('', response_model=list[UserResponse])
def list_users(db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    return crud.list_records(db, User)


@router.get('/{user_id}', response_model=UserResponse)
def get_user(user_id: str, db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    return crud.get_record(db, User, user_id, 'User')


@router.put('/{user_id}', response_model=UserResponse)
def update_user(
    user_id: str,
    data: UserUpdateRequest,
    db: Session = Depends(get_db),
    _: User = Depends(require_roles(*ADMIN_ONLY)),
):
    user = crud.get_record(db, User, user_id, 'User')
    changes = crud.reject_null_fields(
        data.model_dump(exclude_unset=True),
        ('name', 'email', 'password', 'role'),
    )

    if 'email' in changes:
        ensure_email_available(db, changes['email'], current_id=user.id)
    if 'password' in changes:
        changes['hashed_password'] = jwt_handler.hash_password(changes.pop('password'))
    if 'role' in changes:
        changes['role'] = changes['role'].value

    return crud.update_record(db, user, changes)


@router.delete('/{user_id}')
def delete_user(user_id: str, db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    user = crud.get_record(db, User, user_id, 'User')
    crud.delete_record(db, user)
    return {'message': 'User deleted successfully.'}


@router.delete('')
def delete_all_users(db: Session = Depends(get_db), _: User = Depends(require_roles(*ADMIN_ONLY))):
    deleted_count = crud.delete_all_records(db, User)
    return {'message': 'All users deleted successfully.', 'deleted_count': deleted_count}
