"""
初始資料：權限、三個角色與兩個管理帳號

重複執行不會產生重複資料；既有帳號的密碼不會被覆寫。
"""
import logging
import random

from sqlalchemy.orm import Session

from sso_admin.config import settings
from sso_admin.models.permission import Permission
from sso_admin.models.role import ADMIN, SUPER_ADMIN, USER, Role
from sso_admin.models.user import User

logger = logging.getLogger(__name__)

PERMISSIONS = {
    "manage_admins": "Can manage admin users",
    "manage_users": "Can manage regular users",
    "view_all_logs": "Can view all system logs",
    "view_limited_logs": "Can view limited system logs",
    "configure_system": "Can configure system settings",
    "basic_configuration": "Can perform basic configuration",
    "manage_integrations": "Can manage system integrations",
}

ROLES = {
    SUPER_ADMIN: (
        "Has full access to all features and can manage Admins",
        ["manage_admins", "manage_users", "view_all_logs", "configure_system", "manage_integrations"],
    ),
    ADMIN: (
        "Has limited administrative access",
        ["manage_users", "view_limited_logs", "basic_configuration"],
    ),
    USER: (
        "Regular user with limited permissions",
        ["view_limited_logs"],
    ),
}

_FIRST_NAMES = ["john", "jane", "alex", "sam", "mike", "sarah", "emma", "david", "lisa", "chris"]
_LAST_NAMES = ["smith", "johnson", "williams", "brown", "jones", "miller", "davis", "garcia", "wilson", "moore"]
_DOMAINS = ["gmail.com", "outlook.com", "example.com", "company.com", "mail.com"]


def random_email():
    return "{}.{}{}@{}".format(
        random.choice(_FIRST_NAMES),
        random.choice(_LAST_NAMES),
        random.randint(0, 999),
        random.choice(_DOMAINS),
    )


def _get_or_create_permission(db, name, description):
    permission = db.query(Permission).filter(Permission.name == name).first()
    if not permission:
        permission = Permission(name=name, description=description)
        db.add(permission)
        db.flush()
    return permission


def _get_or_create_role(db, name, description, permissions):
    role = db.query(Role).filter(Role.name == name).first()
    if not role:
        role = Role(name=name, description=description)
        db.add(role)
    for permission in permissions:
        if permission not in role.permissions:
            role.permissions.append(permission)
    db.flush()
    return role


def _get_or_create_user(db, email, name, password, role):
    user = db.query(User).filter(User.email == email).first()
    if not user:
        user = User(email=email, name=name, role=role)
        user.set_password(password)
        db.add(user)
        db.flush()
        logger.info("已創建用戶 %s (%s)", email, role.name)
    return user


def seed_identity_store(db: Session, extra_users: int = 0):
    """
    建立初始權限、角色與帳號

    Args:
        db: 資料庫 session
        extra_users: 額外建立的一般用戶數量

    Returns:
        dict: 角色名稱對應的 Role
    """
    permissions = {
        name: _get_or_create_permission(db, name, description)
        for name, description in PERMISSIONS.items()
    }

    roles = {}
    for name, (description, permission_names) in ROLES.items():
        roles[name] = _get_or_create_role(
            db, name, description, [permissions[p] for p in permission_names]
        )

    _get_or_create_user(db, "superadmin@example.com", "Super Admin",
                        settings.SEED_SUPERADMIN_PASSWORD, roles[SUPER_ADMIN])
    _get_or_create_user(db, "admin@example.com", "Regular Admin",
                        settings.SEED_ADMIN_PASSWORD, roles[ADMIN])

    created = 0
    while created < extra_users:
        email = random_email()
        if db.query(User).filter(User.email == email).first():
            continue
        created += 1
        _get_or_create_user(db, email, f"User {created}", settings.SEED_USER_PASSWORD, roles[USER])

    db.commit()
    return roles


def is_seeded(db: Session) -> bool:
    return db.query(Role).count() > 0
