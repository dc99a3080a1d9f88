from flask_wtf import FlaskForm
from wtforms import StringField, PasswordField
from wtforms.validators import DataRequired

class LoginForm(FlaskForm):
    """用户登录表单 (username 字段填写邮箱)"""
    username = StringField('Email', validators=[
        DataRequired(message="Email cannot be empty")
    ])
    password = PasswordField('Password', validators=[
        DataRequired(message="Password cannot be empty")
    ])
