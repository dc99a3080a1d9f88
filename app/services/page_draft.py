"""
页面编辑器模型

对应后台的页面编辑表单：在内存中组装区块、给出分字段的错误提示，
最终生成提交给 /api/pages 的请求体。所有区块变动都经过排序引擎。
"""
from datetime import date

from app.exceptions import Forbidden
from app.models.content import Block
from app.services import block_service
from app.utils.permissions import is_admin
from app.utils.validators import check_page, parse_date


class PageDraft:
    """新建或编辑中的页面"""

    FIELDS = ('title', 'author', 'date', 'blocks')

    def __init__(self, author, title='', publication_date=None, blocks=None,
                 page_id=None, creation_date=None):
        """
        :param author: {'name', 'username'}
        :param creation_date: 编辑已有页面时为原始创建日期；新建时为 None (按今天计算)
        """
        self.page_id = page_id
        self.author = dict(author)
        self.title = title
        self.publication_date = publication_date
        self.creation_date = creation_date
        self.blocks = _place(blocks or [])

    @classmethod
    def from_page(cls, page):
        """由 Page.to_dict(with_blocks=True) 的结果构造编辑器"""
        return cls(
            author=page['author'],
            title=page['title'],
            publication_date=parse_date(page.get('publicationDate')),
            blocks=[{'type': b['type'], 'content': b['content'], 'position': b['position']}
                    for b in page.get('blocks', [])],
            page_id=page['id'],
            creation_date=parse_date(page['creationDate']),
        )

    @property
    def is_new(self):
        return self.page_id is None

    # ---------- 区块操作 ----------

    def add_header_block(self):
        self.blocks = block_service.insert(self.blocks, block_service.new_block(Block.TYPE_HEADER))
        return self.blocks[-1]

    def add_paragraph_block(self):
        self.blocks = block_service.insert(self.blocks, block_service.new_block(Block.TYPE_PARAGRAPH))
        return self.blocks[-1]

    def add_image_block(self, image_name):
        """图片块在选定图片后才加入，内容即图片文件名"""
        self.blocks = block_service.insert(self.blocks, block_service.new_block(Block.TYPE_IMAGE, image_name))
        return self.blocks[-1]

    def edit_block(self, position, content):
        self.blocks = block_service.edit(self.blocks, position, content)

    def remove_block(self, position):
        self.blocks = block_service.remove(self.blocks, position)

    def move_block_up(self, position):
        self.blocks = block_service.move_up(self.blocks, position)

    def move_block_down(self, position):
        self.blocks = block_service.move_down(self.blocks, position)

    def set_author(self, author, acting_user):
        """只有管理员能在编辑器里切换作者"""
        if not is_admin(acting_user):
            raise Forbidden()
        self.author = {'name': author['name'], 'username': author['username']}

    # ---------- 校验与提交 ----------

    def errors(self, today=None):
        """
        按字段归类的错误信息，每个字段一个列表，没有错误的字段为空列表。
        与服务端使用同一套规则。
        """
        creation_date = self.creation_date or today or date.today()
        slots = {field: [] for field in self.FIELDS}
        for field, message in check_page(self.title, self.author.get('username'),
                                         self.publication_date, creation_date, self.blocks):
            slots[field].append(message)
        return slots

    def is_valid(self, today=None):
        return not any(self.errors(today).values())

    def to_payload(self):
        """生成提交给服务端的请求体"""
        payload = {
            'title': self.title.strip(),
            'authorUsername': self.author['username'],
            'publicationDate': parse_date(self.publication_date).isoformat() if self.publication_date else '',
            'blocks': [dict(b) for b in self.blocks],
        }
        if not self.is_new:
            payload['id'] = self.page_id
            payload['creationDate'] = self.creation_date.isoformat()
        return payload


def _place(blocks):
    """已带 position 的区块重新编号；缺少 position 的按顺序追加到末尾"""
    placed = block_service.normalize([b for b in blocks if 'position' in b])
    for block in blocks:
        if 'position' not in block:
            placed = block_service.insert(placed, block)
    return placed
