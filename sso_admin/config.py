import os
import secrets


def _env_flag(name, default=False):
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


class Config:
    DATABASE_URL = os.environ.get("SSO_ADMIN_DATABASE_URL", "sqlite:///./sso_admin.db")
    # 未設定時每次啟動產生隨機金鑰，重啟後既有 session 全部失效
    SECRET_KEY = os.environ.get("SSO_ADMIN_SECRET_KEY") or secrets.token_hex(24)
    SECRET_KEY_FROM_ENV = bool(os.environ.get("SSO_ADMIN_SECRET_KEY"))
    ALGORITHM = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES = int(os.environ.get("SSO_ADMIN_TOKEN_EXPIRE_MINUTES", "30"))

    # Cookie 設定
    COOKIE_NAME = "access_token"
    COOKIE_SECURE = _env_flag("SSO_ADMIN_COOKIE_SECURE")

    # Web服務配置
    HOST = os.environ.get("SSO_ADMIN_HOST", "127.0.0.1")
    PORT = int(os.environ.get("SSO_ADMIN_PORT", "8000"))
    CORS_ORIGINS = os.environ.get("SSO_ADMIN_CORS_ORIGINS", "http://localhost:3000")
    LOG_LEVEL = os.environ.get("SSO_ADMIN_LOG_LEVEL", "INFO")

    # 初始帳號密碼
    SEED_SUPERADMIN_PASSWORD = os.environ.get("SSO_ADMIN_SEED_SUPERADMIN_PASSWORD", "superadmin123")
    SEED_ADMIN_PASSWORD = os.environ.get("SSO_ADMIN_SEED_ADMIN_PASSWORD", "admin123")
    SEED_USER_PASSWORD = os.environ.get("SSO_ADMIN_SEED_USER_PASSWORD", "user123")

    def get_cors_origins(self):
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",") if origin.strip()]


settings = Config()
