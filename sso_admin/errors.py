"""
管理 API 的錯誤類型

所有錯誤都會由 main.py 的例外處理器轉為 {"error": message} 與對應的狀態碼。
"""


class AdminError(Exception):
    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class Unauthorized(AdminError):
    status_code = 401
    default_message = "Unauthorized"


class Forbidden(AdminError):
    status_code = 403
    default_message = "Forbidden"


class NotFound(AdminError):
    status_code = 404
    default_message = "Not found"


class ValidationFailed(AdminError):
    status_code = 400
    default_message = "Invalid request"


class Conflict(AdminError):
    status_code = 409
    default_message = "Conflict"
