from blinker import Namespace

_potion_client = Namespace()

request_logged = _potion_client.signal('request-logged')

item_loaded = _potion_client.signal('item-loaded')

before_create = _potion_client.signal('before-create')

after_create = _potion_client.signal('after-create')

before_update = _potion_client.signal('before-update')

after_update = _potion_client.signal('after-update')

before_delete = _potion_client.signal('before-delete')

after_delete = _potion_client.signal('after-delete')
