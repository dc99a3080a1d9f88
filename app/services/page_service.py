"""页面管理服务"""
from datetime import date
from flask import current_app
from sqlalchemy.orm import joinedload, selectinload

from app.extensions import db
from app.exceptions import NotFound, ValidationFailure
from app.models.content import Page, Block
from app.services import block_service
from app.services.user_service import UserService
from app.utils.audit import log_action
from app.utils.permissions import (
    ensure_can_view, ensure_can_author, ensure_can_modify, ensure_can_reassign
)
from app.utils.transaction import transactional
from app.utils.validators import require_object, validate_page


class PageService:
    """
    页面读写。
    读取时实时计算状态；写入前先完成校验与鉴权，
    区块替换 (删除旧区块 -> 插入新区块) 在同一事务内完成。
    """

    # ---------- 数据访问 ----------

    @staticmethod
    def list_all_pages():
        return (Page.query
                .options(joinedload(Page.author))
                .order_by(Page.id)
                .all())

    @staticmethod
    def list_published_pages(today=None):
        """发布日期不晚于今天的页面，按发布日期倒序"""
        today = today or date.today()
        return (Page.query
                .options(joinedload(Page.author))
                .filter(Page.publication_date.isnot(None))
                .filter(Page.publication_date <= today)
                .order_by(Page.publication_date.desc(), Page.id.desc())
                .all())

    @staticmethod
    def get_page_with_blocks(page_id, for_update=False):
        query = Page.query.options(joinedload(Page.author), selectinload(Page.blocks))
        if for_update:
            query = query.with_for_update(of=Page)
        page = query.filter(Page.id == page_id).first()
        if page is None:
            raise NotFound('Page not found.')
        return page

    @staticmethod
    def insert_page(title, author, publication_date, creation_date=None):
        page = Page(
            title=title,
            author=author,
            creation_date=creation_date or date.today(),
            publication_date=publication_date,
        )
        db.session.add(page)
        db.session.flush()
        return page

    @staticmethod
    def update_page_meta(page, title, author, publication_date):
        """creation_date 不可修改"""
        page.title = title
        page.author = author
        page.publication_date = publication_date
        db.session.flush()
        return page

    @staticmethod
    def insert_block(page_id, block):
        row = Block(
            page_id=page_id,
            type=block['type'],
            content=str(block['content']),
            position=block['position'],
        )
        db.session.add(row)
        db.session.flush()
        return row

    @staticmethod
    def delete_all_blocks_for_page(page_id):
        """删除页面下全部区块，返回删除数量；页面不存在时抛出 NotFound"""
        page = db.session.get(Page, page_id)
        if page is None:
            raise NotFound('Page not found.')
        count = Block.query.filter_by(page_id=page_id).delete(synchronize_session='evaluate')
        db.session.expire(page, ['blocks'])
        return count

    # ---------- 业务流程 ----------

    @staticmethod
    def list_pages():
        return [p.to_dict() for p in PageService.list_all_pages()]

    @staticmethod
    def list_published(today=None):
        return [p.to_dict() for p in PageService.list_published_pages(today)]

    @staticmethod
    def get_page(page_id, user=None):
        """读取单个页面；匿名用户只能看到已发布页面"""
        page = PageService.get_page_with_blocks(page_id)
        ensure_can_view(user, page)
        return page.to_dict(with_blocks=True)

    @staticmethod
    def create_page(payload, user, today=None):
        """
        新建页面及其区块
        :param payload: {'title', 'authorUsername', 'publicationDate', 'blocks': [...]}
        """
        data = require_object(payload)
        creation_date = today or date.today()
        publication_date = validate_page(
            data.get('title'), data.get('authorUsername'), data.get('publicationDate'),
            creation_date, data.get('blocks'),
        )

        author = UserService.get_user_by_username(data['authorUsername'])
        ensure_can_author(user, author)

        blocks = block_service.normalize(data['blocks'])
        with transactional('Database error during the creation of the page.'):
            page = PageService.insert_page(data['title'].strip(), author, publication_date, creation_date)
            for block in blocks:
                PageService.insert_block(page.id, block)
            log_action('pages', 'create_page', {'page_id': page.id, 'title': page.title}, user=user)

        current_app.logger.info(f'页面已创建: #{page.id} by {user.username}')
        return PageService.get_page(page.id, user)

    @staticmethod
    def update_page(page_id, payload, user):
        """
        编辑页面。顺序：页面存在 -> 规则校验 -> 新作者存在 -> 权限 -> 写入。
        发布日期与页面原始创建日期比较，忽略客户端传来的 creationDate。
        """
        data = require_object(payload)
        if data.get('id') is not None and data.get('id') != page_id:
            raise ValidationFailure('Page id in the body does not match the requested page')

        page = PageService.get_page_with_blocks(page_id, for_update=True)
        publication_date = validate_page(
            data.get('title'), data.get('authorUsername'), data.get('publicationDate'),
            page.creation_date, data.get('blocks'),
        )

        author = UserService.get_user_by_username(data['authorUsername'])
        ensure_can_modify(user, page)
        ensure_can_reassign(user, page, author)

        blocks = block_service.normalize(data['blocks'])
        with transactional(f'Database error during the update of page {page_id}.'):
            PageService.update_page_meta(page, data['title'].strip(), author, publication_date)
            PageService.delete_all_blocks_for_page(page.id)
            for block in blocks:
                PageService.insert_block(page.id, block)
            log_action('pages', 'update_page', {'page_id': page.id, 'title': page.title}, user=user)

        current_app.logger.info(f'页面已更新: #{page.id} by {user.username}')
        return PageService.get_page(page.id, user)

    @staticmethod
    def delete_page(page_id, user):
        """删除页面及其全部区块 (同一事务)"""
        page = PageService.get_page_with_blocks(page_id, for_update=True)
        ensure_can_modify(user, page)

        with transactional(f'Database error during the deletion of page {page_id}.'):
            PageService.delete_all_blocks_for_page(page.id)
            db.session.delete(page)
            log_action('pages', 'delete_page', {'page_id': page_id, 'title': page.title}, user=user)

        current_app.logger.info(f'页面已删除: #{page_id} by {user.username}')
