import logging

import uvicorn
from fastapi import Depends, FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, RedirectResponse
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session
from starlette.exceptions import HTTPException as StarletteHTTPException

from sso_admin.config import settings
from sso_admin.database import SessionLocal, dispose_engine, get_db, init_db
from sso_admin.dependencies import get_current_principal_optional
from sso_admin.errors import AdminError
from sso_admin.routers import auth, client_users, clients, roles, users
from sso_admin.routers.auth import set_session_cookie
from sso_admin.security import authenticate, create_access_token
from sso_admin.seed import is_seeded, seed_identity_store
from sso_admin.templates import templates

# 設置日誌
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="SSO Admin Panel", redirect_slashes=False)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "PATCH", "DELETE"],
    allow_headers=["Content-Type", "Authorization"],
)


# 所有錯誤統一回傳 {"error": message}
@app.exception_handler(AdminError)
async def admin_error_handler(request: Request, exc: AdminError):
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        first = errors[0]
        field = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"Invalid request: {field}: {first.get('msg')}" if field else f"Invalid request: {first.get('msg')}"
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content={"error": message})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("未處理的錯誤: %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


# 包含路由器
app.include_router(auth.router, prefix="/api/auth", tags=["Auth"])
app.include_router(clients.router, prefix="/api/clients", tags=["Clients"])
app.include_router(roles.router, prefix="/api/roles", tags=["Roles"])
app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(client_users.router, prefix="/api/client-users", tags=["Client Users"])


@app.on_event("startup")
def startup_event():
    if not settings.SECRET_KEY_FROM_ENV:
        logger.warning("SSO_ADMIN_SECRET_KEY 未設定，使用臨時金鑰，重啟後需重新登入")
    init_db()
    db = SessionLocal()
    try:
        if not is_seeded(db):
            seed_identity_store(db)
            logger.info("已建立初始角色與管理帳號")
    finally:
        db.close()
    logger.info("Application startup")


@app.on_event("shutdown")
def shutdown_event():
    dispose_engine()
    logger.info("Application shutdown")


@app.get("/health")
def health():
    return {"status": "healthy"}


# 首頁
@app.get("/", response_class=HTMLResponse)
def index(request: Request, principal=Depends(get_current_principal_optional)):
    if not principal:
        return RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)
    return templates.TemplateResponse(request, "index.html", {"principal": principal})


# 登入頁面
@app.get("/login", response_class=HTMLResponse)
def login_page(request: Request):
    return templates.TemplateResponse(request, "login.html", {})


# 處理登入
@app.post("/login", response_class=HTMLResponse)
def login(
    request: Request,
    form_data: OAuth2PasswordRequestForm = Depends(),
    db: Session = Depends(get_db)
):
    principal = authenticate(db, form_data.username, form_data.password)
    if principal is None:
        return templates.TemplateResponse(
            request,
            "login.html",
            {"error": "Invalid email or password", "email": form_data.username},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )
    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    set_session_cookie(response, create_access_token(principal))
    return response


# 登出
@app.get("/logout")
def logout():
    response = RedirectResponse(url="/login", status_code=status.HTTP_302_FOUND)
    response.delete_cookie(key=settings.COOKIE_NAME)
    return response


if __name__ == "__main__":
    uvicorn.run("main:app", host=settings.HOST, port=settings.PORT)
