"""
后台管理权限校验
"""

import hashlib
import hmac

from config import ADMIN_PASSWORD_SHA256


class AdminPolicy:
    """管理员校验接口"""

    def check(self, password: str) -> bool:
        raise NotImplementedError


class DenyAllPolicy(AdminPolicy):
    """未配置密码时拒绝所有后台操作"""

    def check(self, password: str) -> bool:
        return False


class PasswordHashPolicy(AdminPolicy):
    """比较密码的 SHA-256 摘要"""

    def __init__(self, password_sha256: str):
        self.digest = password_sha256.strip().lower()

    def check(self, password: str) -> bool:
        if not password:
            return False
        supplied = hashlib.sha256(password.encode("utf-8")).hexdigest()
        return hmac.compare_digest(supplied, self.digest)


def default_policy(password_sha256: str = ADMIN_PASSWORD_SHA256) -> AdminPolicy:
    if not password_sha256:
        return DenyAllPolicy()
    return PasswordHashPolicy(password_sha256)
