"""
校验规则

页面规则只有一份：编辑器 (PageDraft) 用它给出分字段提示，
服务端 (PageService) 用它做最终把关，两边结果一致。
"""
from datetime import date, datetime
from wtforms.validators import ValidationError

from app.exceptions import ValidationFailure
from app.models.content import Block

MSG_TITLE_EMPTY = 'Page title cannot be empty'
MSG_AUTHOR_EMPTY = "Page author's username cannot be empty"
MSG_BLOCKS_NOT_LIST = 'Blocks must be a list'
MSG_TOO_FEW_BLOCKS = 'You must add at least two blocks'
MSG_NO_HEADER = 'There must be at least one header block'
MSG_NO_PARAGRAPH_OR_IMAGE = 'There must be at least one paragraph or image block'
MSG_EMPTY_CONTENT = 'Blocks content cannot be empty'
MSG_EMPTY_IMAGE = 'Image blocks must reference an image'
MSG_POSITION_NOT_INT = 'Blocks position must be an integer'
MSG_DATE_FORMAT = 'Wrong date format'
MSG_DATE_ORDER = 'Publication date must be after the creation date'


def validate_not_blank(form, field):
    """WTForms 校验器：去掉首尾空白后不能为空"""
    if field.data is None or not str(field.data).strip():
        raise ValidationError(f'{field.label.text} cannot be empty')


def is_integer(value):
    return isinstance(value, int) and not isinstance(value, bool)


def parse_date(value):
    """
    解析 'YYYY-MM-DD' 日期。
    None 或空串视为未设置，返回 None；格式错误抛出 ValueError。
    """
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise ValueError(MSG_DATE_FORMAT)
    value = value.strip()
    if value == '':
        return None
    if len(value) != 10:
        raise ValueError(MSG_DATE_FORMAT)
    return datetime.strptime(value, '%Y-%m-%d').date()


def _is_blank(value):
    return value is None or (isinstance(value, str) and not value.strip())


def check_blocks(blocks):
    """区块结构规则，返回违规信息列表 (按规则去重)"""
    if not isinstance(blocks, list):
        return [MSG_BLOCKS_NOT_LIST]

    errors = []

    def add(message):
        if message not in errors:
            errors.append(message)

    if len(blocks) < 2:
        add(MSG_TOO_FEW_BLOCKS)

    types = [b.get('type') if isinstance(b, dict) else None for b in blocks]
    if Block.TYPE_HEADER not in types:
        add(MSG_NO_HEADER)
    if Block.TYPE_PARAGRAPH not in types and Block.TYPE_IMAGE not in types:
        add(MSG_NO_PARAGRAPH_OR_IMAGE)

    for block in blocks:
        if not isinstance(block, dict):
            add('Blocks must be objects')
            continue
        block_type = block.get('type')
        if block_type not in Block.TYPES:
            add(f'Unknown block type: {block_type}')
        elif block_type == Block.TYPE_IMAGE:
            if _is_blank(block.get('content')):
                add(MSG_EMPTY_IMAGE)
        elif _is_blank(block.get('content')):
            add(MSG_EMPTY_CONTENT)
        if not is_integer(block.get('position')):
            add(MSG_POSITION_NOT_INT)
    return errors


def check_page(title, author_username, publication_date, creation_date, blocks):
    """
    执行全部页面规则，返回 [(字段, 信息), ...]，字段取值 title/author/date/blocks。
    一条规则失败不会中断后续规则，所有违规一次性返回。
    :param publication_date: date、None 或边界层传入的原始字符串
    :param creation_date: 新建时为今天，编辑时为页面原始创建日期
    """
    errors = []

    if not isinstance(title, str) or _is_blank(title):
        errors.append(('title', MSG_TITLE_EMPTY))
    if not isinstance(author_username, str) or _is_blank(author_username):
        errors.append(('author', MSG_AUTHOR_EMPTY))

    try:
        pub_date = parse_date(publication_date)
    except ValueError:
        errors.append(('date', MSG_DATE_FORMAT))
    else:
        if pub_date is not None and pub_date < creation_date:
            errors.append(('date', MSG_DATE_ORDER))

    errors.extend(('blocks', message) for message in check_blocks(blocks))
    return errors


def validate_page(title, author_username, publication_date, creation_date, blocks):
    """服务端最终校验：有任一违规即抛出 ValidationFailure，否则返回解析后的发布日期"""
    errors = check_page(title, author_username, publication_date, creation_date, blocks)
    if errors:
        raise ValidationFailure([message for _, message in errors])
    return parse_date(publication_date)


def require_object(payload):
    """JSON 请求体必须是对象"""
    if not isinstance(payload, dict):
        raise ValidationFailure('Request body must be a JSON object')
    return payload
