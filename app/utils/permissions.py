"""
权限控制工具
提供装饰器和辅助函数用于检查用户权限
"""
from functools import wraps
from flask_login import current_user

from app.exceptions import Forbidden, Unauthenticated
from app.models.content import STATUS_PUBLISHED


def admin_required(f):
    """
    管理员权限装饰器
    未登录返回 401，非管理员返回 403
    """
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not current_user.is_authenticated:
            raise Unauthenticated()
        if not is_admin(current_user):
            raise Forbidden()
        return f(*args, **kwargs)
    return decorated_function


def acting_user():
    """当前登录用户；匿名访问返回 None"""
    if current_user and current_user.is_authenticated:
        return current_user._get_current_object()
    return None


def is_admin(user):
    return user is not None and user.is_admin


def ensure_can_view(user, page):
    """匿名用户只能读取已发布页面，其余状态一律视为未登录，不泄露内容"""
    if user is None and page.status != STATUS_PUBLISHED:
        raise Unauthenticated()


def ensure_can_author(user, author):
    """新建页面：署名作者必须是本人，或操作者为管理员"""
    if user is None:
        raise Unauthenticated()
    if author.id != user.id and not is_admin(user):
        raise Forbidden()


def ensure_can_modify(user, page):
    """编辑 / 删除：必须是页面当前作者，或操作者为管理员"""
    if user is None:
        raise Unauthenticated()
    if page.author_id != user.id and not is_admin(user):
        raise Forbidden()


def ensure_can_reassign(user, page, new_author):
    """只有管理员可以更换页面作者"""
    if new_author.id != page.author_id and not is_admin(user):
        raise Forbidden()
