from datetime import date, timedelta

import pytest
from sqlalchemy.exc import SQLAlchemyError

from app.extensions import db
from app.exceptions import (
    Forbidden, NotFound, PersistenceFailure, Unauthenticated, ValidationFailure
)
from app.models import AuditLog, Block, User
from app.services.page_service import PageService
from app.utils import validators as v
from app.utils.transaction import transactional

TODAY = date.today()


def user(username):
    return User.query.filter_by(username=username).one()


def test_create_page_is_draft_with_ordered_blocks(ctx, make_payload):
    page = PageService.create_page(make_payload(), user('alice'))

    assert page['status'] == 'draft'
    assert page['publicationDate'] is None
    assert page['creationDate'] == TODAY.isoformat()
    assert page['author'] == {'name': 'Alice Author', 'username': 'alice'}
    assert [(b['type'], b['position']) for b in page['blocks']] == [('header', 1), ('paragraph', 2)]
    assert AuditLog.query.filter_by(action='create_page').count() == 1


def test_create_page_repairs_block_order(ctx, make_payload):
    blocks = [
        {'type': 'paragraph', 'content': 'second', 'position': 9},
        {'type': 'header', 'content': 'first', 'position': 4},
    ]
    page = PageService.create_page(make_payload(blocks=blocks), user('alice'))
    assert [(b['content'], b['position']) for b in page['blocks']] == [('first', 1), ('second', 2)]


def test_create_page_validation_has_no_side_effects(ctx, make_payload):
    payload = make_payload(title='', blocks=[{'type': 'header', 'content': 'H', 'position': 1}])
    with pytest.raises(ValidationFailure) as exc:
        PageService.create_page(payload, user('alice'))

    assert exc.value.messages == [v.MSG_TITLE_EMPTY, v.MSG_TOO_FEW_BLOCKS, v.MSG_NO_PARAGRAPH_OR_IMAGE]
    assert PageService.list_all_pages() == []


def test_create_page_rejects_past_publication_date(ctx, make_payload):
    payload = make_payload(publication_date=(TODAY - timedelta(days=1)).isoformat())
    with pytest.raises(ValidationFailure) as exc:
        PageService.create_page(payload, user('alice'))
    assert exc.value.messages == [v.MSG_DATE_ORDER]


def test_create_for_other_author_needs_admin(ctx, make_payload):
    with pytest.raises(Forbidden):
        PageService.create_page(make_payload(author='bob'), user('alice'))

    page = PageService.create_page(make_payload(author='bob'), user('admin'))
    assert page['author']['username'] == 'bob'


def test_create_with_unknown_author(ctx, make_payload):
    with pytest.raises(NotFound):
        PageService.create_page(make_payload(author='ghost'), user('admin'))


def test_create_requires_identity(ctx, make_payload):
    with pytest.raises(Unauthenticated):
        PageService.create_page(make_payload(), None)


def test_status_visibility_for_anonymous_readers(ctx, make_payload):
    alice = user('alice')
    draft = PageService.create_page(make_payload(), alice)
    scheduled = PageService.create_page(
        make_payload(publication_date=(TODAY + timedelta(days=3)).isoformat()), alice)
    live = PageService.create_page(make_payload(publication_date=TODAY.isoformat()), alice)

    assert scheduled['status'] == 'programmed'
    assert live['status'] == 'published'

    with pytest.raises(Unauthenticated):
        PageService.get_page(draft['id'])
    with pytest.raises(Unauthenticated):
        PageService.get_page(scheduled['id'])
    assert PageService.get_page(live['id'])['title'] == 'T'
    assert PageService.get_page(draft['id'], alice)['status'] == 'draft'

    assert [p['id'] for p in PageService.list_published()] == [live['id']]
    assert len(PageService.list_pages()) == 3


def test_published_list_is_newest_first(ctx, make_payload):
    alice = user('alice')
    old = PageService.create_page(make_payload(title='old'), alice, today=TODAY - timedelta(days=20))
    new = PageService.create_page(make_payload(title='new'), alice, today=TODAY - timedelta(days=20))
    for page_id, days_ago in ((old['id'], 10), (new['id'], 2)):
        payload = make_payload(publication_date=(TODAY - timedelta(days=days_ago)).isoformat())
        PageService.update_page(page_id, payload, alice)

    assert [p['id'] for p in PageService.list_published()] == [new['id'], old['id']]


def test_get_missing_page(ctx):
    with pytest.raises(NotFound):
        PageService.get_page(999, user('alice'))


def test_update_replaces_blocks_and_keeps_creation_date(ctx, make_payload):
    alice = user('alice')
    created_on = TODAY - timedelta(days=10)
    page = PageService.create_page(make_payload(), alice, today=created_on)

    blocks = [
        {'type': 'image', 'content': 'cat.jpeg', 'position': 1},
        {'type': 'header', 'content': 'New H', 'position': 2},
        {'type': 'paragraph', 'content': 'New P', 'position': 3},
    ]
    payload = make_payload(title='Renamed', blocks=blocks,
                           publication_date=(created_on + timedelta(days=1)).isoformat())
    payload['creationDate'] = TODAY.isoformat()
    updated = PageService.update_page(page['id'], payload, alice)

    assert updated['title'] == 'Renamed'
    assert updated['creationDate'] == created_on.isoformat()
    assert updated['status'] == 'published'
    assert [b['content'] for b in updated['blocks']] == ['cat.jpeg', 'New H', 'New P']
    assert Block.query.filter_by(page_id=page['id']).count() == 3


def test_update_publication_before_creation_fails(ctx, make_payload):
    alice = user('alice')
    created_on = TODAY - timedelta(days=5)
    page = PageService.create_page(make_payload(), alice, today=created_on)

    payload = make_payload(publication_date=(created_on - timedelta(days=1)).isoformat())
    with pytest.raises(ValidationFailure) as exc:
        PageService.update_page(page['id'], payload, alice)
    assert exc.value.messages == [v.MSG_DATE_ORDER]


def test_update_by_non_author_is_forbidden(ctx, make_payload):
    page = PageService.create_page(make_payload(), user('alice'))
    with pytest.raises(Forbidden):
        PageService.update_page(page['id'], make_payload(author='bob'), user('bob'))
    with pytest.raises(Forbidden):
        PageService.update_page(page['id'], make_payload(), user('bob'))


def test_only_admin_reassigns_author(ctx, make_payload):
    page = PageService.create_page(make_payload(), user('alice'))

    with pytest.raises(Forbidden):
        PageService.update_page(page['id'], make_payload(author='bob'), user('alice'))

    updated = PageService.update_page(page['id'], make_payload(author='bob'), user('admin'))
    assert updated['author']['username'] == 'bob'


def test_update_missing_page_reports_not_found_first(ctx, make_payload):
    with pytest.raises(NotFound):
        PageService.update_page(404, make_payload(title=''), user('bob'))


def test_update_rolls_back_block_replacement(ctx, make_payload, monkeypatch):
    alice = user('alice')
    page = PageService.create_page(make_payload(), alice)

    def broken_insert(page_id, block):
        raise SQLAlchemyError('disk full')

    monkeypatch.setattr(PageService, 'insert_block', staticmethod(broken_insert))
    with pytest.raises(PersistenceFailure):
        PageService.update_page(page['id'], make_payload(title='Changed'), alice)

    db.session.expire_all()
    current = PageService.get_page(page['id'], alice)
    assert current['title'] == 'T'
    assert [b['content'] for b in current['blocks']] == ['H', 'P']


def test_delete_page_removes_blocks(ctx, make_payload):
    alice = user('alice')
    page = PageService.create_page(make_payload(), alice)

    PageService.delete_page(page['id'], alice)

    assert Block.query.count() == 0
    with pytest.raises(NotFound):
        PageService.get_page(page['id'], alice)


def test_delete_permissions(ctx, make_payload):
    page = PageService.create_page(make_payload(), user('alice'))

    with pytest.raises(Forbidden):
        PageService.delete_page(page['id'], user('bob'))
    with pytest.raises(NotFound):
        PageService.delete_page(999, user('bob'))

    PageService.delete_page(page['id'], user('admin'))
    assert PageService.list_all_pages() == []


def test_duplicate_block_position_is_not_stored(ctx, make_payload):
    page = PageService.create_page(make_payload(), user('alice'))

    with pytest.raises(PersistenceFailure):
        with transactional('duplicate position'):
            PageService.insert_block(page['id'], {'type': 'paragraph', 'content': 'again', 'position': 2})

    db.session.expire_all()
    assert Block.query.filter_by(page_id=page['id']).count() == 2
