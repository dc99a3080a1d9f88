from datetime import datetime
from app.extensions import db

class BaseModel(db.Model):
    """
    CMS 模型基类
    包含：ID主键, 创建时间, 更新时间
    """
    __abstract__ = True

    id = db.Column(db.Integer, primary_key=True, autoincrement=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
