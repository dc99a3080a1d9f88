"""用户数据访问服务"""
from flask import current_app
from app.extensions import db
from app.exceptions import NotFound, ValidationFailure
from app.models.auth import User


class UserService:
    """用户查询与凭证校验"""

    @staticmethod
    def get_user_by_id(user_id):
        user = db.session.get(User, user_id)
        if user is None:
            raise NotFound('User not found.')
        return user

    @staticmethod
    def get_user_by_username(username):
        user = User.query.filter_by(username=username).first()
        if user is None:
            raise NotFound('User not found.')
        return user

    @staticmethod
    def verify_credentials(email, password):
        """
        校验登录凭证
        :return: 成功返回 User，失败返回 False (不区分账号不存在与密码错误)
        """
        if not isinstance(email, str) or not isinstance(password, str):
            return False
        user = User.query.filter_by(email=email).first()
        if user is None or not user.verify_password(password):
            current_app.logger.warning(f'登录失败: {email}')
            return False
        return user

    @staticmethod
    def list_users():
        """作者下拉列表所需的精简信息"""
        users = User.query.order_by(User.name).all()
        return [{'name': u.name, 'username': u.username} for u in users]

    @staticmethod
    def create_user(email, username, name, password, role=User.ROLE_USER):
        if role not in (User.ROLE_USER, User.ROLE_ADMIN):
            raise ValidationFailure(f'Unknown role: {role}')
        if User.query.filter((User.email == email) | (User.username == username)).first():
            raise ValidationFailure('A user with this email or username already exists')
        user = User(email=email, username=username, name=name, password=password, role=role)
        db.session.add(user)
        db.session.commit()
        return user
