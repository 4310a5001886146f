"""Shared fixtures for the exporter tests."""

import pytest

from exporters import ByteStore


class FakeByteStore(ByteStore):
    """In-memory byte store recording fetches and writes."""

    def __init__(self, content=None, failing=()):
        self.content = dict(content or {})
        self.failing = set(failing)
        self.fetched = []
        self.written = {}

    def fetch_bytes(self, url):
        self.fetched.append(url)
        if url in self.failing:
            raise IOError(f"connection refused: {url}")
        return self.content.get(url, b'\x89PNG fake image')

    def write_bytes(self, path, data):
        self.written[path] = data


def build_raw_post(post_id=1, slug='hello-world', content='<p>Hello</p>', **overrides):
    """Build a post object shaped like /wp-json/wp/v2/posts?_embed=1 output."""
    post = {
        'id': post_id,
        'slug': slug,
        'date': '2024-03-01T10:00:00',
        'modified': '2024-03-02T11:30:00',
        'status': 'publish',
        'link': f'https://blog.example.com/{slug}/',
        'author': 7,
        'title': {'rendered': f'Post {post_id}'},
        'content': {'rendered': content},
        'excerpt': {'rendered': '<p>Short summary</p>\n'},
        '_embedded': {
            'author': [{'id': 7, 'name': 'Jane Doe'}],
            'wp:term': [
                [{'id': 1, 'name': 'News'}, {'id': 2, 'name': 'Releases'}],
                [{'id': 3, 'name': 'python'}],
            ],
        },
    }
    post.update(overrides)
    return post


@pytest.fixture
def byte_store():
    return FakeByteStore()


@pytest.fixture
def raw_post():
    return build_raw_post()


@pytest.fixture
def make_raw_post():
    return build_raw_post


@pytest.fixture
def fake_byte_store_class():
    return FakeByteStore
