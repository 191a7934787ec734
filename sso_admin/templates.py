from pathlib import Path

from fastapi.templating import Jinja2Templates

TEMPLATES_DIR = Path(__file__).resolve().parent.parent / "templates"

# 創建模板引擎實例
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


def has_permission(principal, permission):
    """檢查身分的權限快照是否包含指定權限"""
    if not principal:
        return False
    return permission in principal.permissions


# 添加全局函數
templates.env.globals["has_permission"] = has_permission
