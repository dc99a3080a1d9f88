from datetime import datetime
from flask import request, jsonify, current_app
from flask_login import login_user, logout_user, login_required, current_user

from app.extensions import db
from app.blueprints.auth import auth_bp
from app.blueprints.auth.forms import LoginForm
from app.exceptions import Unauthenticated, ValidationFailure
from app.services.user_service import UserService
from app.utils.audit import log_action
from app.utils.validators import require_object


@auth_bp.route('', methods=['POST'])
def login():
    """登录：校验凭证并建立会话，返回用户信息"""
    require_object(request.get_json(silent=True))
    form = LoginForm(meta={'csrf': False})
    if not form.validate():
        raise ValidationFailure([m for messages in form.errors.values() for m in messages])

    user = UserService.verify_credentials(form.username.data, form.password.data)
    if not user:
        raise Unauthenticated('Incorrect username or password.')

    login_user(user)
    user.last_login = datetime.utcnow()
    log_action('auth', 'login', {'username': user.username}, user=user)
    db.session.commit()

    current_app.logger.info(f'用户登录: {user.username}')
    return jsonify(user.to_dict())


@auth_bp.route('/current')
@login_required
def current():
    """当前会话用户"""
    return jsonify(current_user.to_dict())


@auth_bp.route('/current', methods=['DELETE'])
def logout():
    if current_user.is_authenticated:
        log_action('auth', 'logout', {'username': current_user.username})
        db.session.commit()
    logout_user()
    return jsonify({})
