from flask_wtf import FlaskForm
from wtforms import StringField
from app.utils.validators import validate_not_blank

class AppConfigForm(FlaskForm):
    """站点配置表单"""
    appName = StringField("App's name", validators=[validate_not_blank])
