"""
存取控制規則

角色層級固定為 SuperAdmin > Admin > user。這裡只放不碰資料庫的判斷，
路由先載入資料，再呼叫這些函式決定放行或丟出 Forbidden。
"""
import logging

from sso_admin.errors import Forbidden, Unauthorized, ValidationFailed
from sso_admin.models.client import VALID_GRANT_TYPES, VALID_SCOPES
from sso_admin.models.role import ADMIN, SUPER_ADMIN, USER

logger = logging.getLogger(__name__)

ADMIN_ROLES = (SUPER_ADMIN, ADMIN)

# Admin 看得到的角色
ADMIN_VISIBLE_ROLES = (ADMIN, USER)


def is_super_admin(principal):
    return principal is not None and principal.role == SUPER_ADMIN


def require_role(principal, allowed_roles=ADMIN_ROLES):
    if principal is None:
        raise Unauthorized()
    if principal.role not in allowed_roles:
        logger.warning("拒絕存取: %s (%s) 不在 %s", principal.email, principal.role, list(allowed_roles))
        raise Forbidden()
    return principal


def require_owner_or_super_admin(principal, owner_id, message=None):
    """只有 SuperAdmin 或資源擁有者可以操作"""
    if is_super_admin(principal):
        return principal
    if owner_id is not None and owner_id == principal.id:
        return principal
    logger.warning("拒絕存取: %s 不是擁有者 (owner_id=%s)", principal.email, owner_id)
    raise Forbidden(message)


def visible_role_names(principal):
    """None 代表全部角色"""
    if is_super_admin(principal):
        return None
    return ADMIN_VISIBLE_ROLES


def check_role_assignment(principal, current_role_name, new_role_name):
    if principal.role == ADMIN and new_role_name == SUPER_ADMIN:
        raise Forbidden("Admins cannot assign SuperAdmin role")
    if current_role_name == SUPER_ADMIN and not is_super_admin(principal):
        raise Forbidden("Only SuperAdmins can modify other SuperAdmins")


def validate_scopes(scopes):
    if scopes and not all(scope in VALID_SCOPES for scope in scopes):
        raise ValidationFailed("Invalid scopes provided")
    return scopes


def validate_grant_types(grant_types):
    if grant_types and not all(grant_type in VALID_GRANT_TYPES for grant_type in grant_types):
        raise ValidationFailed("Invalid grant types provided")
    return grant_types
