from flask_login import UserMixin
from werkzeug.security import generate_password_hash, check_password_hash
from app.extensions import db
from .base import BaseModel

class User(UserMixin, BaseModel):
    """用户"""
    __tablename__ = 'auth_users'

    ROLE_USER = 'user'
    ROLE_ADMIN = 'admin'

    email = db.Column(db.String(128), unique=True, index=True, nullable=False)
    username = db.Column(db.String(64), unique=True, index=True, nullable=False)
    name = db.Column(db.String(128), nullable=False)  # 页面展示用的作者全名
    password_hash = db.Column(db.String(256))
    role = db.Column(db.String(16), default=ROLE_USER, nullable=False)
    last_login = db.Column(db.DateTime)

    pages = db.relationship('Page', back_populates='author', lazy='dynamic')

    @property
    def password(self):
        raise AttributeError('password is not readable')

    @password.setter
    def password(self, password):
        # werkzeug 生成带盐哈希，校验时使用常量时间比较
        self.password_hash = generate_password_hash(password)

    def verify_password(self, password):
        if not self.password_hash:
            return False
        return check_password_hash(self.password_hash, password)

    @property
    def is_admin(self):
        return self.role == self.ROLE_ADMIN

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'username': self.username,
            'email': self.email,
            'role': self.role,
        }

    def __repr__(self):
        return f'<User {self.username}>'
