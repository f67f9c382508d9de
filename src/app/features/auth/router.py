"""API routes for user authentication: token issue, first-admin bootstrap and user management."""
import logging
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from tortoise.transactions import in_transaction
from typing import Annotated

from . import models
from . import schemas
from . import security as auth_security
from . import service as auth_service

logger = logging.getLogger(__name__)
router = APIRouter(
    tags=["Authentication"],
    prefix="/auth"
)

@router.post("/token", response_model=schemas.Token)
async def login_for_access_token(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()]
):
    user = await auth_service.get_user_by_username(username=form_data.username)
    if not user or not auth_security.verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=auth_security.INACTIVE_ACCOUNT_DETAIL,
        )
    access_token = auth_security.create_access_token(data={"sub": user.username})
    logger.info(f"Issued access token for {user.username}")
    return {"access_token": access_token, "token_type": "bearer"}

@router.get("/bootstrap", response_model=schemas.BootstrapStatus)
async def bootstrap_status():
    """Tells the UI whether to show the login form or the first-user form."""
    return {"has_users": await auth_service.has_users()}

@router.post("/bootstrap", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
async def bootstrap_admin(user_in: schemas.BootstrapAdminCreate):
    """Creates the first admin account. Only allowed while no user exists."""
    user_data = user_in.model_dump(exclude={"password"})
    user_data["role"] = models.ROLE_ADMIN
    hashed_password = auth_security.get_password_hash(user_in.password)
    # The emptiness check and the insert must see the same snapshot.
    async with in_transaction("default"):
        if await auth_service.has_users():
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Users already exist",
            )
        new_user = await auth_service.create_user(
            user_in=user_data,
            hashed_password_val=hashed_password,
        )
    logger.info(f"Bootstrapped first admin user {new_user.username}")
    return schemas.UserResponse.model_validate(new_user)

@router.post("/users", response_model=schemas.UserResponse, status_code=status.HTTP_201_CREATED)
async def create_user(
    user_in: schemas.UserCreate,
    admin: Annotated[models.User, Depends(auth_security.get_current_active_admin_user)],
):
    if await auth_service.get_user_by_username(username=user_in.username):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Username already registered",
        )
    if await auth_service.get_user_by_email(email=user_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )
    hashed_password = auth_security.get_password_hash(user_in.password)
    try:
        new_user = await auth_service.create_user(
            user_in=user_in.model_dump(exclude={"password"}),
            hashed_password_val=hashed_password
        )
    except Exception as e:
        logger.error(f"Create user failed: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Could not create user.",
        )
    logger.info(f"{admin.username} created user {new_user.username} ({new_user.role})")
    return schemas.UserResponse.model_validate(new_user)

@router.get("/me", response_model=schemas.UserResponse)
async def read_current_user(
    current_user: Annotated[models.User, Depends(auth_security.get_current_active_user)],
):
    return schemas.UserResponse.model_validate(current_user)
