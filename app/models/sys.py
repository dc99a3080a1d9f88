from app.extensions import db
from .base import BaseModel

class AppConfig(BaseModel):
    """全局站点配置 (单行)"""
    __tablename__ = 'sys_app_config'

    app_name = db.Column(db.String(128), nullable=False)


class AuditLog(BaseModel):
    """系统操作审计"""
    __tablename__ = 'sys_audit_logs'

    user_id = db.Column(db.Integer, db.ForeignKey('auth_users.id'))
    module = db.Column(db.String(32)) # e.g., 'auth', 'pages'
    action = db.Column(db.String(64)) # e.g., 'login', 'create_page'
    ip_address = db.Column(db.String(64))
    details = db.Column(db.Text) # JSON 详情

    user = db.relationship('User')
