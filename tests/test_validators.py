from datetime import date, datetime, timedelta

import pytest

from app.exceptions import ValidationFailure
from app.utils import validators as v

CREATED = date(2024, 3, 10)


def header(content='H', position=1):
    return {'type': 'header', 'content': content, 'position': position}


def paragraph(content='P', position=2):
    return {'type': 'paragraph', 'content': content, 'position': position}


def image(content='cat.jpeg', position=2):
    return {'type': 'image', 'content': content, 'position': position}


def messages(blocks, title='T', author='alice', publication_date='', creation_date=CREATED):
    return [m for _, m in v.check_page(title, author, publication_date, creation_date, blocks)]


def test_valid_page_has_no_errors():
    assert messages([header(), paragraph()]) == []
    assert messages([header(), image()]) == []


def test_single_block_rejected():
    assert v.MSG_TOO_FEW_BLOCKS in messages([header()])


def test_missing_header_rejected():
    result = messages([paragraph(position=1), paragraph()])
    assert result == [v.MSG_NO_HEADER]


def test_missing_paragraph_or_image_rejected():
    result = messages([header(), header(position=2)])
    assert result == [v.MSG_NO_PARAGRAPH_OR_IMAGE]


def test_empty_text_block_rejected():
    assert messages([header(), paragraph('')]) == [v.MSG_EMPTY_CONTENT]
    assert messages([header('   '), paragraph()]) == [v.MSG_EMPTY_CONTENT]


def test_image_needs_reference():
    assert messages([header(), image(None)]) == [v.MSG_EMPTY_IMAGE]


def test_all_violations_reported_together():
    result = messages([paragraph('', position=1)], title='  ', publication_date='2024-03-09')
    assert result == [
        v.MSG_TITLE_EMPTY,
        v.MSG_DATE_ORDER,
        v.MSG_TOO_FEW_BLOCKS,
        v.MSG_NO_HEADER,
        v.MSG_EMPTY_CONTENT,
    ]


def test_fields_are_tagged():
    errors = v.check_page('', '', 'not-a-date', CREATED, [header()])
    fields = [field for field, _ in errors]
    assert fields == ['title', 'author', 'date', 'blocks', 'blocks']


def test_publication_date_rules():
    blocks = [header(), paragraph()]
    assert messages(blocks, publication_date='2024-03-10') == []
    assert messages(blocks, publication_date=CREATED + timedelta(days=1)) == []
    assert messages(blocks, publication_date='2024-03-09') == [v.MSG_DATE_ORDER]
    assert messages(blocks, publication_date='10/03/2024') == [v.MSG_DATE_FORMAT]
    assert messages(blocks, publication_date='2024-02-30') == [v.MSG_DATE_FORMAT]
    assert messages(blocks, publication_date=None) == []


def test_position_must_be_integer():
    result = messages([header(position='1'), paragraph(position=2.5)])
    assert result == [v.MSG_POSITION_NOT_INT]


def test_unknown_block_type():
    result = messages([header(), {'type': 'video', 'content': 'x', 'position': 2}])
    assert 'Unknown block type: video' in result


def test_blocks_must_be_a_list():
    assert messages(None) == [v.MSG_BLOCKS_NOT_LIST]


def test_validate_page_raises_with_every_message():
    with pytest.raises(ValidationFailure) as exc:
        v.validate_page('', 'alice', '', CREATED, [header()])
    assert exc.value.messages == [v.MSG_TITLE_EMPTY, v.MSG_TOO_FEW_BLOCKS, v.MSG_NO_PARAGRAPH_OR_IMAGE]
    assert exc.value.message == '; '.join(exc.value.messages)
    assert exc.value.code == 422


def test_validate_page_returns_parsed_date():
    result = v.validate_page('T', 'alice', '2024-04-01', CREATED, [header(), paragraph()])
    assert result == date(2024, 4, 1)
    assert v.validate_page('T', 'alice', '', CREATED, [header(), paragraph()]) is None


def test_author_must_be_a_string():
    assert messages([header(), paragraph()], author=['alice']) == [v.MSG_AUTHOR_EMPTY]
    assert messages([header(), paragraph()], author={'username': 'alice'}) == [v.MSG_AUTHOR_EMPTY]


def test_datetime_publication_date_is_truncated_to_day():
    assert v.parse_date(datetime(2024, 3, 10, 23, 59)) == CREATED
    blocks = [header(), paragraph()]
    assert messages(blocks, publication_date=datetime(2024, 3, 10, 8, 0)) == []
    assert messages(blocks, publication_date=datetime(2024, 3, 9, 8, 0)) == [v.MSG_DATE_ORDER]


def test_require_object():
    assert v.require_object({'a': 1}) == {'a': 1}
    for payload in (None, ['x'], 'text'):
        with pytest.raises(ValidationFailure):
            v.require_object(payload)
