"""
区块排序引擎

页面区块以 dict 表示: {'type', 'content', 'position'[, 'id']}。
所有函数都不修改入参，返回新的列表；position 始终保持 1..N 连续。
"""
from app.exceptions import NotFound, ValidationFailure
from app.models.content import Block
from app.utils.validators import is_integer


def _copy(blocks):
    """按 position 排序后逐个复制"""
    return [dict(b) for b in sorted(blocks, key=lambda b: b['position'])]


def _index_of(blocks, position):
    for idx, block in enumerate(blocks):
        if block['position'] == position:
            return idx
    return None


def new_block(block_type, content=''):
    """构造一个尚未定位的区块"""
    if block_type not in Block.TYPES:
        raise ValidationFailure(f'Unknown block type: {block_type}')
    return {'type': block_type, 'content': content}


def insert(blocks, block):
    """追加到末尾，position = len(blocks) + 1"""
    result = _copy(blocks)
    appended = dict(block)
    appended['position'] = len(result) + 1
    result.append(appended)
    return result


def edit(blocks, position, content):
    """
    替换指定位置区块的内容，不影响顺序。
    位置不存在时抛出 NotFound，原列表保持不变。
    """
    result = _copy(blocks)
    idx = _index_of(result, position)
    if idx is None:
        raise NotFound(f'No block at position {position}.')
    result[idx]['content'] = content
    return result


def move_up(blocks, position):
    """与上一个区块交换；已在顶部或位置越界时不做任何改变"""
    result = _copy(blocks)
    idx = _index_of(result, position)
    if idx is None or idx == 0:
        return result
    result[idx], result[idx - 1] = result[idx - 1], result[idx]
    result[idx]['position'] += 1
    result[idx - 1]['position'] -= 1
    return result


def move_down(blocks, position):
    """与下一个区块交换；已在底部或位置越界时不做任何改变"""
    result = _copy(blocks)
    idx = _index_of(result, position)
    if idx is None or idx == len(result) - 1:
        return result
    result[idx], result[idx + 1] = result[idx + 1], result[idx]
    result[idx]['position'] -= 1
    result[idx + 1]['position'] += 1
    return result


def remove(blocks, position):
    """删除区块，并把其后所有区块的 position 减 1，不留空位"""
    result = _copy(blocks)
    idx = _index_of(result, position)
    if idx is None:
        raise NotFound(f'No block at position {position}.')
    del result[idx]
    for block in result:
        if block['position'] > position:
            block['position'] -= 1
    return result


def is_contiguous(blocks):
    """position 是否恰好为 1..N 的排列"""
    positions = [b.get('position') for b in blocks]
    if not all(is_integer(p) for p in positions):
        return False
    return sorted(positions) == list(range(1, len(blocks) + 1))


def normalize(blocks):
    """
    修复任意整数排序 (有空位或重复)：按 position 稳定排序后重新编号为 1..N。
    调用前 position 必须已校验为整数。
    """
    result = _copy(blocks)
    for pos, block in enumerate(result, start=1):
        block['position'] = pos
    return result
