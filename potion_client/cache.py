import threading


class IdentityCache(object):
    """
    Per-context memoization of resource instances keyed by location (``"<resource path>/<id>"``).

    The map is guarded by a lock, but :meth:`lookup` calls ``populate`` outside of it: two concurrent misses for the
    same key each fetch, and the last one to finish wins.
    """

    def __init__(self):
        self._items = {}
        self._lock = threading.RLock()

    def lookup(self, key, populate):
        """
        Return the cached value for ``key`` or call ``populate()`` and cache its result.
        """
        key = str(key)
        with self._lock:
            if key in self._items:
                return self._items[key]

        value = populate()

        with self._lock:
            self._items[key] = value
        return value

    def get(self, key, default=None):
        with self._lock:
            return self._items.get(str(key), default)

    def set(self, key, value):
        with self._lock:
            self._items[str(key)] = value

    def remove(self, key):
        with self._lock:
            return self._items.pop(str(key), None)

    def clear(self):
        with self._lock:
            self._items.clear()

    def __contains__(self, key):
        with self._lock:
            return str(key) in self._items

    def __len__(self):
        with self._lock:
            return len(self._items)
