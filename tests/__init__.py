import json
from unittest import TestCase
from urllib.parse import urlsplit

import requests
from flask import Flask, jsonify, request
from requests.adapters import BaseAdapter
from requests.structures import CaseInsensitiveDict

from potion_client import HttpSource, Context, MemoryCallLogger, Resource, Filter, Scope, fields

BASE_URL = 'http://api.test/v1'


class FlaskAdapter(BaseAdapter):
    """
    A :mod:`requests` transport adapter that dispatches requests to a Flask application's test client.
    """

    def __init__(self, app, prefix=urlsplit(BASE_URL).path):
        super(FlaskAdapter, self).__init__()
        self.app = app
        self.prefix = prefix

    def send(self, request, **kwargs):
        url = urlsplit(request.url)
        path = url.path[len(self.prefix):] if url.path.startswith(self.prefix) else url.path

        headers = {k: v for k, v in request.headers.items() if k.lower() != 'content-length'}

        r = self.app.test_client().open(path,
                                        method=request.method,
                                        query_string=url.query,
                                        headers=headers,
                                        data=request.body)

        response = requests.Response()
        response.status_code = r.status_code
        response.headers = CaseInsensitiveDict(dict(r.headers))
        response._content = r.get_data()
        response.encoding = 'utf-8'
        response.reason = r.status
        response.url = request.url
        response.request = request
        return response

    def close(self):
        pass


class ThingStore(object):
    """
    The state of the fake remote API.
    """

    def __init__(self):
        self.items = {}
        self.id_sequence = 0
        self.per_page = 20

    def add(self, **properties):
        self.id_sequence += 1
        item = dict(properties, id=self.id_sequence)
        item.setdefault('size', None)
        item.setdefault('enabled', False)
        self.items[self.id_sequence] = item
        return item


def _as_query_value(value):
    if isinstance(value, bool):
        return str(value).lower()
    return str(value)


def create_thing_api(app, store):
    def listing(items):
        items = list(items)
        for key, value in request.args.items():
            if key not in ('page', 'per_page'):
                items = [item for item in items if _as_query_value(item.get(key)) == value]

        page = request.args.get('page', 1, type=int)
        per_page = request.args.get('per_page', store.per_page, type=int)
        start = per_page * (page - 1)
        return jsonify({
            'result_count': len(items),
            'result': items[start:start + per_page]
        })

    @app.route('/things', methods=['GET'])
    def things():
        return listing(store.items.values())

    @app.route('/things/active', methods=['GET'])
    def active_things():
        return listing(item for item in store.items.values() if item['enabled'])

    @app.route('/things', methods=['POST'])
    def create_thing():
        data = request.get_json()
        if not data.get('name'):
            return jsonify({'errors': {'name': ["can't be blank"]}}), 422
        item = store.add(**data)
        return '', 201, {'Location': '{}/things/{}'.format(BASE_URL, item['id'])}

    @app.route('/things', methods=['DELETE'])
    def delete_things():
        store.items.clear()
        return jsonify({})

    @app.route('/things/<int:id>', methods=['GET'])
    def read_thing(id):
        if id not in store.items:
            return jsonify({'message': 'Not Found'}), 404
        return jsonify({'result': store.items[id]})

    @app.route('/things/<int:id>', methods=['PUT'])
    def update_thing(id):
        if id not in store.items:
            return jsonify({'message': 'Not Found'}), 404
        data = request.get_json()
        if 'name' in data and not data['name']:
            return jsonify({'status': 400,
                            'message': 'Bad Request',
                            'errors': [{'path': ['name'], 'message': "'' is too short"}]}), 400
        store.items[id].update(data)
        return jsonify({'result': store.items[id]})

    @app.route('/things/<int:id>', methods=['DELETE'])
    def delete_thing(id):
        if store.items.pop(id, None) is None:
            return jsonify({'message': 'Not Found'}), 404
        return jsonify({})


class Thing(Resource):
    class Schema:
        name = fields.String()
        size = fields.Integer(nullable=True)
        enabled = fields.Boolean(default=False)

    class Meta:
        name = 'things'

    active = Scope()
    large = Filter(lambda thing, limit=10: (thing.size or 0) > limit)


class BaseTestCase(TestCase):

    def setUp(self):
        self.app = self.create_app()
        self.store = ThingStore()
        self.hits = []

        @self.app.before_request
        def count_hit():
            self.hits.append((request.method, request.path, request.query_string.decode()))

        create_thing_api(self.app, self.store)

        session = requests.Session()
        session.mount(BASE_URL, FlaskAdapter(self.app))

        self.call_logger = MemoryCallLogger()
        self.transport = HttpSource(BASE_URL, call_logger=self.call_logger, session=session)
        self.context = Context(self.transport)

    def create_app(self):
        app = Flask(__name__)
        app.debug = True
        return app

    def assertJSONEqual(self, first, second, msg=None):
        self.assertEqual(json.loads(json.dumps(first)), json.loads(json.dumps(second)), msg)

    def assertHits(self, expected, msg=None):
        self.assertEqual(expected, len(self.hits), msg or self.hits)
