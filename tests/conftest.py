"""
Shared fixtures for the TAPI admin tests.

Run with: pytest tests/ -v
Install with: pip install -e ".[dev]"
"""

import asyncio
import json
import os
import shutil
import tempfile
import uuid
from urllib.parse import urlsplit

import pytest
import requests
from flask import Flask, jsonify, request
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from tapi_admin.core.api_client import ApiClient
from tapi_admin.core.storage import TokenStorage
from tapi_admin.forms.attachments import LocalFile
from tapi_admin.modules.auth import AuthSession

TEST_API_URL = "http://tapi.test"
TEST_TOKEN = "test-token"


# ---------------------------------------------------------------------------
# Storage / auth
# ---------------------------------------------------------------------------

@pytest.fixture
def tmp_db_dir():
    """Create a temporary directory for test databases, cleaned up after."""
    d = tempfile.mkdtemp(prefix="tapi-admin-test-")
    yield d
    shutil.rmtree(d, ignore_errors=True)


@pytest.fixture
def storage(tmp_db_dir):
    return TokenStorage(db_path=os.path.join(tmp_db_dir, "client_storage.db"))


@pytest.fixture
def auth(storage):
    """Logged-in auth session"""
    session = AuthSession(storage=storage)
    session.store_token(TEST_TOKEN)
    return session


@pytest.fixture
def anonymous(storage):
    return AuthSession(storage=storage)


# ---------------------------------------------------------------------------
# Scripted client
# ---------------------------------------------------------------------------

class FakeClient:
    """
    Stands in for ApiClient. Each send() consumes the next queued outcome:
    a value is returned, an exception is raised, and an asyncio.Event is
    waited on before the following outcome is used.
    """

    def __init__(self):
        self.calls = []
        self.outcomes = []

    def queue(self, *outcomes):
        self.outcomes.extend(outcomes)
        return self

    async def send(self, method, path, headers=None, json=None, files=None, source='api'):
        self.calls.append({
            'method': method, 'path': path, 'headers': headers,
            'json': json, 'files': files, 'source': source,
        })
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, asyncio.Event):
            await outcome.wait()
            outcome = self.outcomes.pop(0)
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self):
        pass


@pytest.fixture
def fake_client():
    return FakeClient()


def run(coro):
    return asyncio.run(coro)


def image(name="photo.jpg", content=b"\xff\xd8\xffimage-bytes"):
    return LocalFile.from_bytes(name, content)


def parts_named(files, name):
    """Entries of a requests ``files=`` list with the given part name"""
    return [part for part_name, part in files if part_name == name]


# ---------------------------------------------------------------------------
# Fake TAPI server
# ---------------------------------------------------------------------------

class FlaskAdapter(BaseAdapter):
    """Transport adapter that answers requests from a Flask app in-process"""

    def __init__(self, app):
        super().__init__()
        self.client = app.test_client()

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        url = urlsplit(request.url)
        headers = {k: v for k, v in request.headers.items() if k.lower() != 'content-length'}
        body = request.body
        if isinstance(body, str):
            body = body.encode('utf-8')

        resp = self.client.open(
            url.path, method=request.method, headers=headers,
            data=body, query_string=url.query,
        )

        response = requests.Response()
        response.status_code = resp.status_code
        response._content = resp.get_data()
        response.headers = CaseInsensitiveDict(resp.headers)
        response.encoding = 'utf-8'
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


def _ok(data, status=200):
    return jsonify({'success': True, 'data': data}), status


def _fail(message, status):
    return jsonify({'success': False, 'message': message}), status


def _json_part(name, default):
    raw = request.form.get(name)
    return json.loads(raw) if raw else default


def create_fake_api():
    """Flask app imitating the TAPI server's admin endpoints"""
    app = Flask(__name__)
    app.config['TESTING'] = True
    app.config['RECEIVED'] = []
    db = {'products': {}, 'team': {}, 'blogs': {}, 'admins': {}}
    app.config['DB'] = db

    def record():
        app.config['RECEIVED'].append({
            'method': request.method,
            'path': request.path,
            'content_type': request.content_type,
            'form': request.form.to_dict(flat=False),
            'files': {name: [f.filename for f in request.files.getlist(name)] for name in request.files},
        })

    def authorized():
        return request.headers.get('Authorization') == f'Bearer {TEST_TOKEN}'

    def stored_url(part):
        f = request.files.get(part)
        return f"https://cdn.tapi.test/{f.filename}" if f else None

    @app.before_request
    def _record():
        record()
        if not request.path.startswith('/admin/') and not authorized():
            return _fail('Unauthorized', 401)
        return None

    # ----- auth -----

    @app.route('/admin/signup', methods=['POST'])
    def signup():
        body = request.get_json()
        if body['email'] in db['admins']:
            return _fail('Admin already exists', 409)
        db['admins'][body['email']] = body['password']
        return _ok({'accessToken': TEST_TOKEN})

    @app.route('/admin/login', methods=['POST'])
    def login():
        body = request.get_json()
        if db['admins'].get(body['email']) != body['password']:
            return _fail('Invalid credentials', 401)
        return _ok({'accessToken': TEST_TOKEN})

    # ----- products -----

    def product_from_form(product):
        product['name'] = request.form['name']
        product['description'] = request.form['description']
        product['benefits'] = _json_part('benefits', [])
        product['applications'] = _json_part('applications', [])
        if stored_url('mainImage'):
            product['mainImage'] = {'url': stored_url('mainImage')}
        extra = request.files.getlist('extraImages')
        if extra:
            product['extraImages'] = [{'url': f"https://cdn.tapi.test/{f.filename}"} for f in extra]
        return product

    @app.route('/product', methods=['GET'])
    def products():
        return _ok(list(db['products'].values()))

    @app.route('/product/create', methods=['POST'])
    def create_product():
        product = product_from_form({'_id': uuid.uuid4().hex})
        db['products'][product['_id']] = product
        return _ok(product, 201)

    @app.route('/product/edit/<pid>', methods=['PUT'])
    def edit_product(pid):
        if pid not in db['products']:
            return _fail('Product not found', 404)
        return _ok(product_from_form(db['products'][pid]))

    # ----- team -----

    def person_from_form(person):
        for key in ('name', 'designation', 'description'):
            person[key] = request.form[key]
        if stored_url('image'):
            person['imageUrl'] = stored_url('image')
        return person

    @app.route('/team', methods=['GET'])
    def team():
        return _ok(list(db['team'].values()))

    @app.route('/team/create', methods=['POST'])
    def create_person():
        person = person_from_form({'_id': uuid.uuid4().hex})
        db['team'][person['_id']] = person
        return _ok(person, 201)

    @app.route('/team/edit/<pid>', methods=['PUT'])
    def edit_person(pid):
        if pid not in db['team']:
            return _fail('Team member not found', 404)
        return _ok(person_from_form(db['team'][pid]))

    # ----- blogs -----

    def blog_from_form(blog):
        for key in ('blogName', 'title', 'excerpt', 'content', 'category'):
            blog[key] = request.form[key]
        blog['tags'] = _json_part('tags', [])
        blog['published'] = request.form.get('published') == 'true'
        blog['blogContent'] = {
            'design': _json_part('designData', {}),
            'markup': request.form.get('markup', ''),
        }
        if stored_url('blogImage'):
            blog['blogImgUrl'] = {'url': stored_url('blogImage')}
        return blog

    @app.route('/blog', methods=['GET'])
    def blogs():
        return _ok(list(db['blogs'].values()))

    @app.route('/blog/create', methods=['POST'])
    def create_blog():
        if 'blogImage' not in request.files:
            return _fail('Banner image is required', 400)
        blog = blog_from_form({'_id': uuid.uuid4().hex})
        db['blogs'][blog['_id']] = blog
        return _ok(blog, 201)

    @app.route('/blog/edit/<bid>', methods=['PUT'])
    def edit_blog(bid):
        if bid not in db['blogs']:
            return _fail('Blog not found', 404)
        return _ok(blog_from_form(db['blogs'][bid]))

    @app.route('/blog/delete/<bid>', methods=['DELETE'])
    def delete_blog(bid):
        if db['blogs'].pop(bid, None) is None:
            return _fail('Blog not found', 404)
        return _ok({'_id': bid})

    return app


@pytest.fixture
def fake_api():
    return create_fake_api()


@pytest.fixture
def api_client(fake_api):
    """Real ApiClient whose requests session is served by the fake API"""
    session = requests.Session()
    session.mount(TEST_API_URL, FlaskAdapter(fake_api))
    client = ApiClient(base_url=TEST_API_URL, timeout=5, session=session)
    yield client
    client.close()
