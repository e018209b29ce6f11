from potion_client import Resource, Filter, Scope, LazyCollection, fields
from potion_client.exceptions import ConfigurationError
from tests import BaseTestCase, Thing


class FilterTestCase(BaseTestCase):

    def setUp(self):
        super(FilterTestCase, self).setUp()
        for i in range(1, 6):
            self.store.add(name=str(i), size=i * 5, enabled=i > 3)

    def test_filter_requires_predicate(self):
        with self.assertRaises(ConfigurationError):
            Filter()

        class Gadget(Resource):
            pass

        with self.assertRaises(ConfigurationError):
            Gadget.filter('broken')
        self.assertEqual({}, Gadget.filters)

    def test_declared_filter(self):
        self.assertIs(Thing.large, Thing.filters['large'])
        self.assertIs(Thing, Thing.large.resource)
        self.assertEqual('large', Thing.large.name)

        self.assertEqual(['3', '4', '5'], [thing.name for thing in Thing.large(self.context)])
        self.assertEqual(['5'], [thing.name for thing in Thing.large(self.context, 20)])

    def test_apply_filter(self):
        things = list(Thing.all(self.context))
        hits = len(self.hits)

        self.assertEqual(['4', '5'], [thing.name for thing in Thing.large.apply(things, 15)])
        self.assertEqual(['4', '5'], [thing.name for thing in Thing.apply_filter('large', things, 15)])
        self.assertHits(hits)

    def test_registered_filter(self):
        class Gadget(Thing):
            class Meta:
                name = 'things'

        named = Gadget.filter('named', lambda gadget, name: gadget.name == name)
        self.assertIs(named, Gadget.filters['named'])
        self.assertNotIn('named', Thing.filters)

        self.assertEqual(['2'], [gadget.name for gadget in Gadget.filtered('named', self.context, '2')])
        self.assertIsInstance(Gadget.filtered('named', self.context, '2')[0], Gadget)

        with self.assertRaises(ConfigurationError):
            Gadget.filtered('unknown', self.context)

        with self.assertRaises(ConfigurationError):
            Gadget.apply_filter('unknown', [])

    def test_inherited_filters_are_rebound(self):
        class Gadget(Thing):
            class Meta:
                name = 'gadgets'

        self.assertIs(Gadget, Gadget.large.resource)
        self.assertIs(Gadget, Gadget.filters['large'].resource)
        self.assertIs(Thing, Thing.large.resource)
        self.assertIs(Gadget, Gadget.active.resource)
        self.assertEqual('gadgets/active', Gadget.active.path)


class ScopeTestCase(BaseTestCase):

    def setUp(self):
        super(ScopeTestCase, self).setUp()
        for i in range(1, 6):
            self.store.add(name=str(i), size=i * 5, enabled=i > 3)

    def test_declared_scope(self):
        active = Thing.active(self.context)
        self.assertIsInstance(active, LazyCollection)
        self.assertEqual('things/active', active.path)
        self.assertHits(0)

        self.assertEqual(['4', '5'], [thing.name for thing in active])
        self.assertEqual(('GET', '/things/active', ''), self.hits[-1])

    def test_registered_scope(self):
        class Gadget(Thing):
            class Meta:
                name = 'things'

        Gadget.scope('enabled_things', resource_name='active')
        scoped = Gadget.scoped('enabled_things', self.context)
        self.assertEqual('things/active', scoped.path)
        self.assertEqual(['4', '5'], [gadget.name for gadget in scoped])

        scoped = Gadget.scoped('enabled_things', self.context, {'name': '5'})
        self.assertEqual('things/active?name=5', scoped.url())
        self.assertEqual(['5'], [gadget.name for gadget in scoped])

        with self.assertRaises(ConfigurationError):
            Gadget.scoped('unknown', self.context)

    def test_query_scope(self):
        class Gadget(Resource):
            class Meta:
                name = 'things'

            small = Scope(resource_name='?size=5')

        self.assertEqual('things?size=5', Gadget.small(self.context).path)
        self.assertEqual(['1'], [gadget.name for gadget in Gadget.small(self.context)])

    def test_query_scope_pages(self):
        class Gadget(Resource):
            class Meta:
                name = 'things'

            on = Scope(resource_name='?enabled=true')

        self.store.per_page = 2
        for i in range(1, 4):
            self.store.items[i]['enabled'] = True

        self.assertEqual(['1', '2', '3', '4', '5'], [gadget.name for gadget in Gadget.on(self.context)])
        self.assertEqual(['things?enabled=true', 'things?enabled=true&page=2', 'things?enabled=true&page=3'],
                         [r.url for r in self.call_logger.requests])
        self.assertEqual(('GET', '/things', 'enabled=true&page=3'), self.hits[-1])

        large = Gadget.on(self.context, {'size': 25})
        self.assertEqual('things?enabled=true&size=25&page=2', large.url(2))
        self.assertEqual(['5'], [gadget.name for gadget in large])

    def test_predicate_scope(self):
        class Gadget(Resource):
            class Schema:
                name = fields.String()
                size = fields.Integer()
                enabled = fields.Boolean()

            class Meta:
                name = 'things'

            odd = Scope(predicate=lambda gadget: gadget.size % 10 == 5)

        odd = Gadget.odd(self.context)
        self.assertIsInstance(odd, list)
        self.assertEqual(['1', '3', '5'], [gadget.name for gadget in odd])

        self.assertEqual(['5'], [gadget.name for gadget in Gadget.odd(self.context, {'enabled': True})])
        self.assertEqual('things?enabled=true', self.call_logger.requests[-1].url)
