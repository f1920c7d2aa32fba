import pytest

from rdfprefix import prefixes


def pytest_configure(config):
    # Register custom markers
    config.addinivalue_line(
        "markers", "network: marks tests as requiring network access (may be slow)"
    )


def make_loader(documents, context_urls=None):
    """Build a document loader serving the given documents keyed by URL."""
    context_urls = context_urls or {}

    def loader(url, options=None):
        if url not in documents:
            raise ValueError('no document at %s' % url)
        return {
            'document': documents[url],
            'contextUrl': context_urls.get(url),
        }

    return loader


@pytest.fixture
def document_loader():
    """Installs a stub default document loader, restoring the previous one."""
    previous = prefixes.get_document_loader()
    documents = {}
    prefixes.set_document_loader(make_loader(documents))
    yield documents
    prefixes.set_document_loader(previous)


@pytest.fixture
def loader_factory():
    """Returns make_loader for tests that pass a loader explicitly."""
    return make_loader
