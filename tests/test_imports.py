"""
Smoke tests to verify all modules can be imported.
"""

def test_import_store():
    import store
    assert hasattr(store, '__version__')


def test_import_query():
    import query
    assert hasattr(query, '__version__')


def test_import_auth():
    import auth
    assert hasattr(auth, '__version__')


def test_import_client():
    import client
    assert hasattr(client, '__version__')


def test_import_cli():
    from client.cli import app
    assert app is not None
