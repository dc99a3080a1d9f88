# 按照依赖顺序导入
from .base import BaseModel
from .auth import User
from .content import Page, Block, resolve_status
from .sys import AppConfig, AuditLog
