# budget_manager/main.py

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from . import auth, borrowings, budgets, expenses, lendings
from .config import FRONTEND_URL, IS_DEVELOPMENT, IS_PRODUCTION, SECRET_KEY
from .database import Base, engine
from .logging_config import configure_logging

configure_logging()
log = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Create tables if not already created
    Base.metadata.create_all(bind=engine)
    log.info("startup", database=engine.url.render_as_string(hide_password=True))
    yield


app = FastAPI(title="Budget Manager API", lifespan=lifespan)


def session_cookie_options(production: bool = IS_PRODUCTION) -> dict:
    # Cross-site front ends only send the cookie when it is SameSite=None; Secure
    if production:
        return {"same_site": "none", "https_only": True}
    return {"same_site": "lax", "https_only": False}


# Session cookie carries the logged-in user id
app.add_middleware(SessionMiddleware, secret_key=SECRET_KEY, **session_cookie_options())

app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_origin_regex=r"^https://.*\.(vercel\.app|netlify\.app|onrender\.com)$",
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
    allow_headers=["Content-Type", "Authorization", "X-Requested-With"],
)

app.include_router(auth.router)
app.include_router(budgets.router)
app.include_router(expenses.router)
app.include_router(borrowings.router)
app.include_router(lendings.router)


@app.exception_handler(StarletteHTTPException)
async def http_error(request: Request, exc: StarletteHTTPException):
    return JSONResponse({"message": exc.detail}, status_code=exc.status_code, headers=exc.headers)


@app.exception_handler(RequestValidationError)
async def validation_error(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in err["loc"][1:]), "message": err["msg"]}
        for err in exc.errors()
    ]
    return JSONResponse(
        {"message": "Validation failed", "errors": errors},
        status_code=status.HTTP_400_BAD_REQUEST,
    )


@app.exception_handler(Exception)
async def server_error(request: Request, exc: Exception):
    log.exception("unhandled_error", path=request.url.path, method=request.method)
    content = {"message": "Internal server error"}
    if IS_DEVELOPMENT:
        content["error"] = str(exc)
    return JSONResponse(content, status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)


@app.get("/api/health")
def health():
    return {"message": "Budget Management API is running"}
