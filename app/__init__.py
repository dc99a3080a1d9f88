import logging
import os
import colorlog
from flask import Flask, jsonify
from config import config
from app.extensions import db, migrate, login_manager, cache, csrf
from app.exceptions import CmsException

# 导入 commands 模块，用于注册 CLI 命令
from app import commands


def create_app(config_name='default'):
    """CMS 应用工厂函数"""
    app = Flask(__name__)

    # 1. 加载配置
    app.config.from_object(config[config_name])
    config[config_name].init_app(app)

    # 2. 初始化扩展
    db.init_app(app)
    migrate.init_app(app, db)
    login_manager.init_app(app)
    cache.init_app(app)
    csrf.init_app(app)

    # 3. 配置日志
    configure_logging(app)

    # 4. 注册蓝图 (Blueprints)
    register_blueprints(app)

    # 5. 注册全局错误处理
    register_error_handlers(app)

    # 6. 注册 CLI 命令
    register_commands(app)

    # 7. 初始化数据库与站点配置
    auto_init_database(app)

    return app


def auto_init_database(app):
    """
    启动时初始化：生产环境自动建表；表已存在时确保站点配置行存在。
    测试环境由测试夹具自行建表。
    """
    if app.testing:
        return
    with app.app_context():
        from sqlalchemy import inspect
        from app.services.config_service import ConfigService
        try:
            tables = inspect(db.engine).get_table_names()
            if 'sys_app_config' not in tables:
                if os.environ.get('FLASK_ENV') != 'production' and not os.environ.get('DATABASE_URL'):
                    app.logger.warning('数据库尚未初始化，请运行 flask forge 或 flask db upgrade')
                    return
                app.logger.info('首次启动，正在创建数据库表...')
                db.create_all()
            ConfigService.ensure_initialized(app.config['APP_NAME'])
        except Exception as e:
            app.logger.error(f'数据库初始化错误: {e}')
            import traceback
            app.logger.error(traceback.format_exc())


def register_blueprints(app):
    """注册所有业务模块蓝图"""
    # 页面 / 配置 / 用户 / 图片 API
    from app.blueprints.api import api_bp
    app.register_blueprint(api_bp, url_prefix='/api')

    # 会话 (登录 / 登出)
    from app.blueprints.auth import auth_bp
    app.register_blueprint(auth_bp, url_prefix='/api/sessions')

    # JSON API 依赖 SameSite 会话 Cookie，不走表单 CSRF 令牌
    csrf.exempt(api_bp)
    csrf.exempt(auth_bp)


def register_error_handlers(app):
    @app.errorhandler(CmsException)
    def handle_cms_exception(e):
        if e.code >= 500:
            app.logger.error(e.message)
        return jsonify(e.to_dict()), e.code

    @app.errorhandler(404)
    def page_not_found(e):
        return jsonify({'error': 'Resource not found.', 'code': 404, 'success': False}), 404

    @app.errorhandler(405)
    def method_not_allowed(e):
        return jsonify({'error': 'Method not allowed.', 'code': 405, 'success': False}), 405

    @app.errorhandler(500)
    def internal_server_error(e):
        return jsonify({'error': 'Internal server error.', 'code': 500, 'success': False}), 500


def register_commands(app):
    """注册 Flask CLI 命令"""
    app.cli.add_command(commands.forge)
    app.cli.add_command(commands.status)
    app.cli.add_command(commands.create_user)


def configure_logging(app):
    """配置彩色控制台日志，提升开发体验"""
    if app.debug:
        handler = logging.StreamHandler()
        handler.setLevel(logging.INFO)

        formatter = colorlog.ColoredFormatter(
            "%(log_color)s[%(asctime)s] %(levelname)-8s%(reset)s %(blue)s%(message)s",
            datefmt="%H:%M:%S",
            reset=True,
            log_colors={
                'DEBUG':    'cyan',
                'INFO':     'green',
                'WARNING':  'yellow',
                'ERROR':    'red',
                'CRITICAL': 'red,bg_white',
            },
            secondary_log_colors={},
            style='%'
        )
        handler.setFormatter(formatter)
        app.logger.addHandler(handler)
        app.logger.setLevel(logging.INFO)
