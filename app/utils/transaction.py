"""
事务边界工具
"""
from contextlib import contextmanager
from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.exceptions import PersistenceFailure


@contextmanager
def transactional(error_message='Database error.'):
    """
    将多步写操作包裹为一个事务：全部成功才提交，任一步失败整体回滚。
    业务异常 (CmsException) 原样抛出；数据库异常转换为 PersistenceFailure。
    """
    try:
        yield db.session
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.error(f'{error_message} {e}')
        raise PersistenceFailure(error_message) from e
    except Exception:
        db.session.rollback()
        raise
