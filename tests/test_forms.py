"""
Form session tests
==================

Dirty tracking, validation, previews and submit through a store.

Run with: pytest tests/test_forms.py -v
"""

import pytest

from conftest import image, run
from tapi_admin.core.errors import HttpError
from tapi_admin.forms import (
    CREATE, EDIT, FileAttachment, FormSession, PreviewRegistry, SessionClosed, parse_tags,
)
from tapi_admin.modules.blogs import BLOG_SCHEMA
from tapi_admin.modules.products import PRODUCT_SCHEMA, ProductStore
from tapi_admin.modules.team import PERSON_SCHEMA

PRODUCT = {
    '_id': 'p1',
    'name': 'Seamless tube',
    'description': 'Cold drawn steel',
    'benefits': [{'point': 'Strong', 'description': 'High tensile'}],
    'applications': [],
    'mainImage': {'url': 'https://cdn.tapi.test/tube.jpg'},
    'extraImages': [{'url': 'https://cdn.tapi.test/a.jpg'}, 'https://cdn.tapi.test/b.jpg'],
}


def valid_blog_values(form, content_length=50):
    form.set_field('title', 'Hello')
    form.set_field('excerpt', 'Short summary')
    form.set_field('content', 'a' * content_length)
    form.set_field('category', 'tutorials')


# ---------------------------------------------------------------------------
# Seeding and dirty tracking
# ---------------------------------------------------------------------------

def test_create_mode_starts_clean_and_invalid():
    form = FormSession(PRODUCT_SCHEMA)
    assert form.mode == CREATE
    assert not form.is_dirty
    assert not form.is_valid
    assert set(form.field_errors) == {'name', 'description'}


def test_edit_mode_starts_clean_and_valid():
    form = FormSession(PRODUCT_SCHEMA, resource=PRODUCT)
    assert form.mode == EDIT
    assert form.resource_id == 'p1'
    assert not form.is_dirty
    assert form.is_valid
    assert form.get('mainImage') == FileAttachment.from_remote('https://cdn.tapi.test/tube.jpg')
    assert len(form.get('extraImages')) == 2


def test_changing_a_field_and_back_is_clean():
    form = FormSession(PRODUCT_SCHEMA, resource=PRODUCT)
    form.set_field('name', 'Welded tube')
    assert form.is_dirty
    form.set_field('name', 'Seamless tube')
    assert not form.is_dirty


def test_list_edits_mark_dirty():
    form = FormSession(PRODUCT_SCHEMA, resource=PRODUCT)
    form.add_entry('benefits')
    form.set_entry_field('benefits', 1, 'point', 'Light')
    assert form.is_dirty
    assert form.get('benefits').values()[1] == {'point': 'Light', 'description': ''}


def test_seed_again_resets_snapshot():
    form = FormSession(PRODUCT_SCHEMA)
    form.set_field('name', 'Draft')
    form.seed(PRODUCT)
    assert form.mode == EDIT
    assert not form.is_dirty


def test_unknown_field():
    form = FormSession(PRODUCT_SCHEMA)
    with pytest.raises(KeyError):
        form.set_field('price', 10)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def test_char_count_on_bounded_field():
    form = FormSession(BLOG_SCHEMA)
    form.set_field('excerpt', 'x' * 501)
    assert form.char_count('excerpt') == (501, 500, -1)

    form.set_field('excerpt', 'x' * 500)
    assert form.char_count('excerpt').remaining == 0


def test_unbounded_fields_accept_long_text():
    product = FormSession(PRODUCT_SCHEMA, resource={**PRODUCT, 'name': 'x' * 300})
    assert product.is_valid
    assert product.char_count('name') == (300, None, None)

    person = FormSession(PERSON_SCHEMA)
    person.set_field('name', 'n' * 150)
    person.set_field('designation', 'd' * 150)
    person.set_field('description', 's' * 1000)
    assert person.is_valid


@pytest.mark.parametrize('name, length, error', [
    ('title', 200, None),
    ('title', 201, 'Title must be at most 200 characters'),
    ('title', 0, 'Title is required'),
    ('excerpt', 500, None),
    ('excerpt', 501, 'Excerpt must be at most 500 characters'),
    ('excerpt', 0, 'Excerpt is required'),
])
def test_blog_title_and_excerpt_bounds(name, length, error):
    form = FormSession(BLOG_SCHEMA)
    form.select_file('image', image('banner.png'))
    valid_blog_values(form)

    form.set_field(name, 'x' * length)

    assert form.field_errors.get(name) == error
    assert form.is_valid is (error is None)


def test_blog_content_needs_fifty_characters():
    form = FormSession(BLOG_SCHEMA)
    form.select_file('image', image('banner.png'))

    valid_blog_values(form, content_length=49)
    assert form.field_errors == {'content': 'Content must be at least 50 characters'}

    form.set_field('content', 'a' * 50)
    assert form.is_valid


def test_blog_banner_required_only_when_creating():
    form = FormSession(BLOG_SCHEMA)
    valid_blog_values(form)
    assert form.field_errors == {'image': 'Please upload a banner image'}

    edit = FormSession(BLOG_SCHEMA, resource={
        '_id': 'b1', 'title': 'Hello', 'excerpt': 'e', 'content': 'a' * 60,
        'category': 'tutorials', 'blogImgUrl': {'url': 'https://cdn.tapi.test/banner.png'},
    })
    assert edit.is_valid


def test_unknown_category_rejected():
    form = FormSession(BLOG_SCHEMA)
    form.set_field('category', 'gossip')
    assert 'category' in form.field_errors


def test_empty_selected_file_rejected():
    form = FormSession(PERSON_SCHEMA)
    form.select_file('image', image('empty.jpg', b''))
    assert form.field_errors['image'] == 'Image: the selected file is empty'


def test_incomplete_list_row_is_a_field_error():
    form = FormSession(PRODUCT_SCHEMA, resource=PRODUCT)
    form.set_entry_field('benefits', 0, 'point', '')
    assert form.field_errors['benefits'] == 'Benefits: entry 1 is missing a point'


def test_bad_list_index_is_kept_apart_from_field_errors():
    form = FormSession(PRODUCT_SCHEMA, resource=PRODUCT)
    assert form.remove_entry('benefits', 9) is False
    assert 'does not exist' in form.list_errors['benefits']
    assert 'benefits' not in form.field_errors
    assert form.is_valid
    assert len(form.get('benefits')) == 1

    assert form.set_entry_field('benefits', 0, 'point', 'Stronger') is True
    assert form.list_errors == {}


def test_parse_tags():
    assert parse_tags('a, b ,c') == ['a', 'b', 'c']
    assert parse_tags(' , ,') == []
    assert parse_tags(['x', ' y ']) == ['x', 'y']


def test_tags_seeded_from_list_compare_clean():
    form = FormSession(BLOG_SCHEMA, resource={'_id': 'b', 'tags': ['steel', 'pipes']})
    assert form.get('tags') == 'steel, pipes'
    form.set_field('tags', 'steel,pipes ')
    assert not form.is_dirty


# ---------------------------------------------------------------------------
# Previews
# ---------------------------------------------------------------------------

def test_preview_released_when_file_reselected():
    previews = PreviewRegistry()
    form = FormSession(PERSON_SCHEMA, previews=previews)

    first = form.select_file('image', image('one.jpg'))
    assert previews.resolve(first).filename == 'one.jpg'

    second = form.select_file('image', image('two.jpg'))
    assert first not in previews
    assert second in previews
    assert form.previews_for('image') == [second]


def test_previews_released_on_close():
    previews = PreviewRegistry()
    with FormSession(PRODUCT_SCHEMA, previews=previews) as form:
        form.select_file('mainImage', image('main.jpg'))
        refs = form.select_files('extraImages', [image('a.jpg'), image('b.jpg')])
        assert len(refs) == 2
        assert len(previews) == 3
    assert len(previews) == 0
    assert form.closed


def test_closed_session_refuses_edits():
    form = FormSession(PRODUCT_SCHEMA)
    form.cancel()
    with pytest.raises(SessionClosed):
        form.set_field('name', 'x')


# ---------------------------------------------------------------------------
# Submit
# ---------------------------------------------------------------------------

def test_invalid_submit_never_reaches_store(auth, fake_client):
    store = ProductStore(auth, fake_client)
    form = store.open_form()

    assert run(form.submit()) is None

    assert form.submit_error == 'Please fix the highlighted fields'
    assert fake_client.calls == []
    assert store.create_state.is_idle
    assert not form.closed


def test_successful_create_closes_form(auth, fake_client):
    store = ProductStore(auth, fake_client)
    fake_client.queue({'_id': 'new', 'name': 'Tube'})
    form = store.open_form()
    form.set_field('name', 'Tube')
    form.set_field('description', 'Round')
    ref = form.select_file('mainImage', image())

    result = run(form.submit())

    assert result == {'_id': 'new', 'name': 'Tube'}
    assert form.closed
    assert ref not in form.previews
    assert store.items == (result,)


def test_edit_submit_goes_to_update(auth, fake_client):
    store = ProductStore(auth, fake_client)
    store._items = [dict(PRODUCT)]
    fake_client.queue({**PRODUCT, 'name': 'Renamed'})
    form = store.open_form(PRODUCT)
    form.set_field('name', 'Renamed')

    run(form.submit())

    assert fake_client.calls[0]['path'] == '/product/edit/p1'
    assert store.items[0]['name'] == 'Renamed'


def test_failed_submit_keeps_form_open(auth, fake_client):
    store = ProductStore(auth, fake_client)
    fake_client.queue(HttpError(413, 'File too large'))
    form = store.open_form(PRODUCT)

    assert run(form.submit()) is None

    assert form.submit_error == 'File too large'
    assert not form.closed
    assert form.can_submit
