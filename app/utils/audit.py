"""
审计日志工具模块
用于记录系统中的所有重要操作
"""
from flask import request, has_request_context
from flask_login import current_user
from app.models.sys import AuditLog
from app.extensions import db
import json


def log_action(module, action, details=None, user=None):
    """
    记录审计日志 (加入当前会话，由调用方的事务一起提交)
    :param module: 模块名称 (如 'auth', 'pages', 'config')
    :param action: 操作名称 (如 'login', 'create_page', 'delete_page')
    :param details: 详细信息 (dict)
    :param user: 操作人，默认取 current_user
    """
    if user is None and has_request_context() and current_user.is_authenticated:
        user = current_user
    if user is None:
        return
    log = AuditLog(
        user_id=user.id,
        module=module,
        action=action,
        ip_address=request.remote_addr if has_request_context() else None,
        details=json.dumps(details, ensure_ascii=False) if details else None
    )
    db.session.add(log)
