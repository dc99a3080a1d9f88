from datetime import date
from app.extensions import db
from .base import BaseModel

STATUS_DRAFT = 'draft'            # 未设置发布日期
STATUS_PROGRAMMED = 'programmed'  # 已排期，发布日期在未来
STATUS_PUBLISHED = 'published'    # 发布日期已到 (含当天)


def resolve_status(publication_date, today=None):
    """
    由发布日期推导页面状态，按天粒度比较。
    状态只在读取时计算，不落库，因此无需后台任务即可随日期自动流转。
    """
    if publication_date is None:
        return STATUS_DRAFT
    if today is None:
        today = date.today()
    if publication_date <= today:
        return STATUS_PUBLISHED
    return STATUS_PROGRAMMED


class Page(BaseModel):
    """CMS 页面：元数据 + 有序区块"""
    __tablename__ = 'cms_pages'

    title = db.Column(db.String(256), nullable=False)
    author_id = db.Column(db.Integer, db.ForeignKey('auth_users.id'), nullable=False, index=True)
    creation_date = db.Column(db.Date, nullable=False, default=date.today)
    publication_date = db.Column(db.Date, nullable=True, index=True)

    author = db.relationship('User', back_populates='pages')
    # 区块完全归属于页面，随页面一起删除
    blocks = db.relationship('Block', back_populates='page', order_by='Block.position',
                             cascade='all, delete-orphan')

    @property
    def status(self):
        return resolve_status(self.publication_date)

    def to_dict(self, with_blocks=False):
        data = {
            'id': self.id,
            'title': self.title,
            'author': {
                'name': self.author.name,
                'username': self.author.username,
            },
            'creationDate': self.creation_date.isoformat(),
            'publicationDate': self.publication_date.isoformat() if self.publication_date else None,
            'status': self.status,
        }
        if with_blocks:
            data['blocks'] = [block.to_dict() for block in self.blocks]
        return data

    def __repr__(self):
        return f'<Page {self.id} {self.title!r}>'


class Block(BaseModel):
    """页面内容区块"""
    __tablename__ = 'cms_blocks'

    TYPE_HEADER = 'header'
    TYPE_PARAGRAPH = 'paragraph'
    TYPE_IMAGE = 'image'
    TYPES = (TYPE_HEADER, TYPE_PARAGRAPH, TYPE_IMAGE)

    page_id = db.Column(db.Integer, db.ForeignKey('cms_pages.id'), nullable=False)
    type = db.Column(db.String(16), nullable=False)
    content = db.Column(db.Text, nullable=False)  # 文本内容；图片块为图片文件名
    position = db.Column(db.Integer, nullable=False)  # 从 1 开始的连续序号，页面内唯一

    page = db.relationship('Page', back_populates='blocks')

    __table_args__ = (
        db.UniqueConstraint('page_id', 'position', name='uq_block_page_position'),
    )

    def to_dict(self):
        return {
            'id': self.id,
            'type': self.type,
            'content': self.content,
            'position': self.position,
        }
