from flask_sqlalchemy import SQLAlchemy
from flask_migrate import Migrate
from flask_login import LoginManager
from flask_caching import Cache
from flask_wtf.csrf import CSRFProtect

# 初始化扩展对象 (暂不绑定 app)
db = SQLAlchemy()
migrate = Migrate()
cache = Cache()
login_manager = LoginManager()
csrf = CSRFProtect()

# 配置 LoginManager
login_manager.session_protection = 'strong'


@login_manager.user_loader
def load_user(user_id):
    """Flask-Login 用户加载回调；用户已被删除时返回 None，会话按匿名处理"""
    from app.exceptions import NotFound
    from app.services.user_service import UserService
    try:
        return UserService.get_user_by_id(int(user_id))
    except NotFound:
        return None


@login_manager.unauthorized_handler
def unauthorized():
    """JSON API 不做跳转，统一抛出 401"""
    from app.exceptions import Unauthenticated
    raise Unauthenticated()
