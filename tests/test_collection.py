from potion_client import Resource, LazyCollection, Pagination
from potion_client.exceptions import ConfigurationError
from tests import BaseTestCase, Thing


class PagedThing(Thing):
    class Meta:
        name = 'things'
        per_page = 3


class PaginationTestCase(BaseTestCase):

    def test_pages(self):
        pagination = Pagination([1, 2], 1, 2, 5)
        self.assertEqual(3, pagination.pages)
        self.assertFalse(pagination.has_prev)
        self.assertTrue(pagination.has_next)

        pagination = Pagination([5], 3, 2, 5)
        self.assertTrue(pagination.has_prev)
        self.assertFalse(pagination.has_next)

    def test_unknown_total(self):
        self.assertIsNone(Pagination([1, 2], 1, 2, None).pages)
        self.assertTrue(Pagination([1, 2], 1, 2, None).has_next)
        self.assertFalse(Pagination([1], 1, 2, None).has_next)
        self.assertFalse(Pagination([1, 2], 1, None, None).has_next)


class LazyCollectionTestCase(BaseTestCase):

    def setUp(self):
        super(LazyCollectionTestCase, self).setUp()
        self.store.per_page = 2
        for i in range(1, 6):
            self.store.add(name=str(i), size=i * 5, enabled=i % 2 == 1)

    def test_all_is_lazy(self):
        things = Thing.all(self.context)
        self.assertIsInstance(things, LazyCollection)
        self.assertEqual('things', things.path)
        self.assertHits(0)

    def test_query_string(self):
        things = Thing.all(self.context, {'a': 1, 'b': 'x'})
        self.assertEqual('things?a=1&b=x', things.url())
        self.assertEqual('things?a=1&b=x&page=2', things.url(2))

        self.assertEqual([], list(things))
        self.assertEqual('things?a=1&b=x', self.call_logger.requests[0].url)

    def test_filter(self):
        self.assertEqual(['3'], [thing.name for thing in Thing.all(self.context, {'name': '3'})])

    def test_iteration(self):
        things = Thing.all(self.context)
        self.assertEqual([1, 2, 3, 4, 5], [thing.id for thing in things])
        self.assertHits(3)
        self.assertEqual(['things', 'things?page=2', 'things?page=3'], [r.url for r in self.call_logger.requests])

        self.assertEqual(5, len(list(things)))
        self.assertHits(6)

    def test_per_page(self):
        self.assertEqual(['1', '2', '3', '4', '5'], [thing.name for thing in PagedThing.all(self.context)])
        self.assertEqual(['things?per_page=3', 'things?page=2&per_page=3'],
                         [r.url for r in self.call_logger.requests])

    def test_default_per_page(self):
        self.transport.config['POTION_CLIENT_DEFAULT_PER_PAGE'] = 4
        self.assertEqual(4, Thing.all(self.context).per_page)

        self.transport.config['POTION_CLIENT_MAX_PER_PAGE'] = 3
        self.assertEqual(3, Thing.all(self.context).per_page)

        with self.assertRaises(ConfigurationError):
            LazyCollection(self.context, Thing, 'things', per_page=0)

    def test_first(self):
        self.assertEqual('1', Thing.first(self.context).name)
        self.assertHits(1)
        self.assertEqual('5', Thing.first(self.context, {'name': '5'}).name)
        self.assertIsNone(Thing.first(self.context, {'name': 'x'}))

    def test_last(self):
        things = Thing.all(self.context)
        self.assertEqual('5', things.last.name)
        self.assertEqual(['things', 'things?page=3'], [r.url for r in self.call_logger.requests])

        self.assertEqual('5', things.last.name)
        self.assertHits(3)

        self.assertEqual('2', Thing.last(self.context, {'size': 10}).name)
        self.assertIsNone(Thing.last(self.context, {'name': 'x'}))

    def test_index(self):
        things = Thing.all(self.context)
        self.assertEqual('4', things[3].name)
        self.assertEqual(['things', 'things?page=2'], [r.url for r in self.call_logger.requests])

        self.assertEqual('1', things[0].name)
        self.assertEqual('5', things[-1].name)

        with self.assertRaises(IndexError):
            things[5]

        with self.assertRaises(IndexError):
            things[-6]

    def test_slice(self):
        things = Thing.all(self.context)
        self.assertEqual(['2', '3'], [thing.name for thing in things[1:3]])
        self.assertEqual(['4', '5'], [thing.name for thing in things[-2:]])

    def test_len(self):
        things = Thing.all(self.context)
        self.assertEqual(5, len(things))
        self.assertEqual(5, things.total)
        self.assertHits(1)
        self.assertEqual(3, len(Thing.all(self.context, {'enabled': True})))

    def test_select(self):
        self.assertEqual(['4', '5'], [thing.name for thing in Thing.all(self.context).select(lambda t: t.size > 15)])

    def test_missing_listing(self):
        class Missing(Resource):
            pass

        missing = Missing.all(self.context)
        self.assertEqual([], list(missing))
        self.assertEqual(0, len(missing))
        self.assertIsNone(missing.first)
        self.assertIsNone(missing.last)

    def test_listing_without_result_count(self):
        @self.app.route('/plain')
        def plain():
            return {'result': [{'id': 1, 'name': 'a'}, {'id': 2, 'name': 'b'}]}

        class Plain(Resource):
            pass

        plain = Plain.all(self.context)
        self.assertEqual(['a', 'b'], [p.name for p in plain])
        self.assertEqual(2, len(plain))
        self.assertEqual('b', plain.last.name)
