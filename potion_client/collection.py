from itertools import islice
from math import ceil


class Pagination(object):
    """
    One page of a listing.

    :param list items: instances on this page
    :param int page: page number, starting at 1
    :param int per_page: page size or ``None`` if the listing is not paged
    :param int total: total number of items reported by the server, or ``None``
    """

    def __init__(self, items, page, per_page, total):
        self.items = items
        self.page = page
        self.per_page = per_page
        self.total = total

    @property
    def pages(self):
        if not self.per_page or self.total is None:
            return None
        return max(1, int(ceil(self.total / self.per_page)))

    @property
    def has_prev(self):
        return self.page > 1

    @property
    def has_next(self):
        if not self.items or not self.per_page:
            return False
        if self.total is None:
            return len(self.items) >= self.per_page
        return self.page < self.pages

    def __repr__(self):
        return '<Pagination page={} per_page={} total={} items={}>'.format(
            self.page, self.per_page, self.total, len(self.items))


class LazyCollection(object):
    """
    A sequence over a listing of a resource that requests pages only when they are needed.

    The first page is requested with the filter as the only query parameters; later pages add the page parameter.
    If no page size is configured, the size of the first page is used as the page size. The collection keeps
    the total count and page size once known, but never the items: iterating twice requests every page twice.

    :param context: :class:`potion_client.context.Context`
    :param resource: the :class:`potion_client.resource.Resource` class of the items
    :param str path: path of the listing, e.g. ``'things'`` or ``'things/active'``
    :param dict filter: query parameters
    :param int per_page: optional page size
    """

    def __init__(self, context, resource, path, filter=None, per_page=None):
        self.context = context
        self.resource = resource
        self.path = path
        self.filter = dict(filter or {})

        config = context.transport.config
        if per_page is None:
            per_page = resource.meta.get('per_page')
        self.per_page = config.per_page(per_page)

        self._total = None
        self._page_size = self.per_page

    @property
    def total(self):
        return self._total

    def _query(self, page):
        config = self.context.transport.config
        query = dict(self.filter)
        if page > 1:
            query[config['POTION_CLIENT_PAGE_PARAM']] = page
        if self.per_page is not None:
            query[config['POTION_CLIENT_PER_PAGE_PARAM']] = self.per_page
        return query

    def url(self, page=1):
        transport = self.context.transport
        return transport.append_query(self.path, transport.hash_to_query(self._query(page)))

    def fetch_page(self, page):
        """
        Request one page of the listing.

        :rtype: Pagination
        """
        listing = self.resource.by_url(self.context, self.path, self._query(page))

        if not listing:
            items, total = [], 0 if page == 1 else self._total
        else:
            items, total = listing['collection'], listing['result_count']

        if page == 1:
            if self._page_size is None:
                self._page_size = len(items) or None
            if total is None and self.per_page is None:
                total = len(items)

        if total is not None:
            self._total = total

        return Pagination(items, page, self._page_size, self._total)

    def _ensure_cursor(self):
        if self._page_size is None or self._total is None:
            return self.fetch_page(1)
        return None

    def __iter__(self):
        page = 1
        while True:
            pagination = self.fetch_page(page)
            for item in pagination.items:
                yield item
            if not pagination.has_next:
                break
            page += 1

    def __len__(self):
        self._ensure_cursor()
        if self._total is None:
            self._total = sum(1 for _ in self)
        return self._total

    @property
    def first(self):
        items = self.fetch_page(1).items
        return items[0] if items else None

    @property
    def last(self):
        pagination = self._ensure_cursor()

        if pagination is None or pagination.has_next:
            last_page = Pagination([None], 1, self._page_size, self._total).pages
            if last_page is None:
                item = None
                for item in self:
                    pass
                return item
            if pagination is None or pagination.page != last_page:
                pagination = self.fetch_page(last_page)

        return pagination.items[-1] if pagination.items else None

    def __getitem__(self, index):
        if isinstance(index, slice):
            if (index.start or 0) < 0 or (index.stop is not None and index.stop < 0) or (index.step or 1) < 0:
                return list(self)[index]
            return list(islice(self, index.start, index.stop, index.step))

        first_page = self._ensure_cursor()

        if index < 0:
            index += len(self)
        if index < 0 or self._page_size is None:
            raise IndexError('collection index out of range')

        page, offset = divmod(index, self._page_size)
        page += 1

        if first_page is not None and page == 1:
            items = first_page.items
        else:
            items = self.fetch_page(page).items

        try:
            return items[offset]
        except IndexError:
            raise IndexError('collection index out of range')

    def select(self, predicate):
        return [item for item in self if predicate(item)]

    def __repr__(self):
        return '<LazyCollection {} {!r} filter={!r}>'.format(self.resource.__name__, self.path, self.filter)
