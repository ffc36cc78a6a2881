# budget_manager/auth.py

import structlog
from fastapi import APIRouter, Depends, HTTPException, Request, status
from passlib.hash import bcrypt
from sqlalchemy.orm import Session

from . import crud
from .database import get_db
from .schemas import LoginIn, RegisterIn, UserOut

router = APIRouter(prefix="/api/auth", tags=["auth"])

log = structlog.get_logger(__name__)


# Dependency to get logged-in user
def get_current_user(request: Request, db: Session = Depends(get_db)):
    user_id = request.session.get("user_id")
    if not user_id:
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Access denied. Please log in.")
    user = crud.get_user(db, user_id)
    if not user:
        request.session.clear()
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Session is no longer valid. User not found.")
    return user


def _start_session(request: Request, user):
    request.session["user_id"] = user.id
    request.session["name"] = user.name


# Register (Signup)
@router.post("/register", status_code=status.HTTP_201_CREATED)
def register(payload: RegisterIn, request: Request, db: Session = Depends(get_db)):
    if crud.get_user_by_email(db, payload.email):
        raise HTTPException(status.HTTP_400_BAD_REQUEST, "Email already registered.")

    user = crud.create_user(db, payload.name, payload.email, bcrypt.hash(payload.password))
    _start_session(request, user)
    log.info("user_registered", user_id=user.id)
    return {"message": "User registered successfully", "user": UserOut.model_validate(user)}


@router.post("/login")
def login(payload: LoginIn, request: Request, db: Session = Depends(get_db)):
    user = crud.get_user_by_email(db, payload.email)
    if not user or not bcrypt.verify(payload.password, user.password):
        raise HTTPException(status.HTTP_401_UNAUTHORIZED, "Invalid email or password.")

    _start_session(request, user)
    log.info("user_logged_in", user_id=user.id)
    return {"message": "Login successful", "user": UserOut.model_validate(user)}


# Logout
@router.post("/logout")
def logout(request: Request):
    request.session.clear()
    return {"message": "Logged out"}


@router.get("/me")
def me(user=Depends(get_current_user)):
    return {"user": UserOut.model_validate(user)}
