from flask import request, jsonify
from flask_login import login_required

from app.blueprints.api import api_bp
from app.blueprints.api.forms import AppConfigForm
from app.exceptions import ValidationFailure
from app.services.config_service import ConfigService
from app.services.page_service import PageService
from app.services.user_service import UserService
from app.utils.file_helper import list_images
from app.utils.permissions import acting_user, admin_required
from app.utils.validators import require_object


def _page_id(raw):
    """路径中的页面 id 必须是正整数"""
    try:
        page_id = int(raw)
    except (TypeError, ValueError):
        page_id = 0
    if page_id < 1:
        raise ValidationFailure('Page id must be a positive integer')
    return page_id


def _form_errors(form):
    return [message for messages in form.errors.values() for message in messages]


# ---------- 页面 ----------

@api_bp.route('/pages')
@login_required
def list_pages():
    """后台：全部页面 (含草稿与排期)"""
    return jsonify(PageService.list_pages())


@api_bp.route('/published-pages')
def list_published_pages():
    """前台：已发布页面，无需登录"""
    return jsonify(PageService.list_published())


@api_bp.route('/pages/<page_id>')
def get_page(page_id):
    """页面详情；未登录只能查看已发布页面"""
    return jsonify(PageService.get_page(_page_id(page_id), acting_user()))


@api_bp.route('/pages', methods=['POST'])
@login_required
def create_page():
    page = PageService.create_page(request.get_json(silent=True), acting_user())
    return jsonify(page), 201


@api_bp.route('/pages/<page_id>', methods=['PUT'])
@login_required
def update_page(page_id):
    page = PageService.update_page(_page_id(page_id), request.get_json(silent=True), acting_user())
    return jsonify(page)


@api_bp.route('/pages/<page_id>', methods=['DELETE'])
@login_required
def delete_page(page_id):
    PageService.delete_page(_page_id(page_id), acting_user())
    return jsonify({})


# ---------- 站点配置 ----------

@api_bp.route('/config')
def get_config():
    return jsonify({'appName': ConfigService.get_app_name()})


@api_bp.route('/config', methods=['PUT'])
@login_required
def update_config():
    """修改站点名称 (管理员)"""
    require_object(request.get_json(silent=True))
    form = AppConfigForm(meta={'csrf': False})
    if not form.validate():
        raise ValidationFailure(_form_errors(form))
    name = ConfigService.set_app_name(form.appName.data, acting_user())
    return jsonify({'appName': name})


# ---------- 用户 / 图片 ----------

@api_bp.route('/users')
@admin_required
def list_users():
    """作者候选列表，仅管理员可见"""
    return jsonify(UserService.list_users())


@api_bp.route('/images')
def images():
    """图片库文件名列表，图片本身由 /static/images/<name> 提供"""
    return jsonify(list_images())
