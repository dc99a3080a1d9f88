"""站点配置服务 (AppConfig 单例)"""
from flask import current_app
from app.extensions import db, cache
from app.exceptions import Forbidden, NotFound, ValidationFailure
from app.models.sys import AppConfig
from app.utils.audit import log_action
from app.utils.permissions import is_admin
from app.utils.transaction import transactional

APP_NAME_CACHE_KEY = 'app_config:app_name'


class ConfigService:

    @staticmethod
    def ensure_initialized(default_name):
        """启动时调用：配置行不存在则按默认名称创建，已存在则不覆盖"""
        if AppConfig.query.first() is None:
            db.session.add(AppConfig(app_name=default_name))
            db.session.commit()
            current_app.logger.info(f'站点配置已初始化: {default_name}')

    @staticmethod
    def get_app_name():
        name = cache.get(APP_NAME_CACHE_KEY)
        if name is not None:
            return name
        row = AppConfig.query.first()
        if row is None:
            raise NotFound('App config not found.')
        cache.set(APP_NAME_CACHE_KEY, row.app_name)
        return row.app_name

    @staticmethod
    def set_app_name(name, user):
        """修改站点名称，仅管理员可用"""
        if not is_admin(user):
            raise Forbidden()
        if name is None or not str(name).strip():
            raise ValidationFailure("App's name cannot be empty")
        name = str(name).strip()

        with transactional('Database error during the update of config.'):
            row = AppConfig.query.first()
            if row is None:
                raise NotFound('App config not found.')
            old_name = row.app_name
            row.app_name = name
            log_action('config', 'update_app_name', {'from': old_name, 'to': name}, user=user)

        cache.delete(APP_NAME_CACHE_KEY)
        current_app.logger.info(f'站点名称已修改: {old_name} -> {name}')
        return name
