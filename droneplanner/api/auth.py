#!/usr/bin/env python3
from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from droneplanner.core.security import create_access_token, unauthorized
from droneplanner.db.session import get_db
from droneplanner.schemas.common import format_document_id
from droneplanner.schemas.user import AuthResponse, CredentialsRequest, UserResponse
from droneplanner.services import user_service


router = APIRouter(tags=["auth"])


def issue(request: Request, user) -> AuthResponse:
    token = create_access_token(format_document_id(user.id), request.app.state.settings)
    return AuthResponse(user=UserResponse.from_orm(user), token=token)


"""Register a new user by email and password.

Returns:
    AuthResponse: {user, token}; 409 if the email is taken
"""
@router.post("/signup", response_model=AuthResponse, status_code=status.HTTP_201_CREATED)
async def signup(request: Request, payload: CredentialsRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.create_user(db, payload.email, payload.password)
    return issue(request, user)


@router.post("/signin", response_model=AuthResponse)
async def signin(request: Request, payload: CredentialsRequest, db: AsyncSession = Depends(get_db)):
    user = await user_service.authenticate(db, payload.email, payload.password)
    if user is None:
        raise unauthorized("Invalid credentials")
    return issue(request, user)
