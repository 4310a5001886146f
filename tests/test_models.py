"""Tests for post records and export settings."""

import dataclasses

import pytest

from models import ExportSettings, PostRecord


class TestPostRecord:
    """Test building posts from REST API objects."""

    def test_from_api_reads_rendered_fields_and_embeds(self, raw_post):
        post = PostRecord.from_api(raw_post)

        assert post.id == 1
        assert post.slug == 'hello-world'
        assert post.title == 'Post 1'
        assert post.content == '<p>Hello</p>'
        assert post.excerpt == '<p>Short summary</p>\n'
        assert post.author == 7
        assert post.author_name == 'Jane Doe'
        assert post.categories == ['News', 'Releases']
        assert post.tags == ['python']
        assert post.featured_media_url is None

    def test_missing_embedded_data_gives_empty_terms(self, make_raw_post):
        raw = make_raw_post()
        del raw['_embedded']

        post = PostRecord.from_api(raw)

        assert post.categories == []
        assert post.tags == []
        assert post.author_name is None

    def test_featured_media_source_url(self, make_raw_post):
        raw = make_raw_post()
        raw['_embedded']['wp:featuredmedia'] = [{'id': 9, 'source_url': 'http://x/cover.jpg'}]

        assert PostRecord.from_api(raw).featured_media_url == 'http://x/cover.jpg'

    def test_raw_is_read_only(self, raw_post):
        post = PostRecord.from_api(raw_post)

        with pytest.raises(TypeError):
            post.raw['slug'] = 'other'
        with pytest.raises(dataclasses.FrozenInstanceError):
            post.slug = 'other'

    def test_missing_slug_is_rejected(self, make_raw_post):
        with pytest.raises(ValueError, match='no slug'):
            PostRecord.from_api(make_raw_post(slug=''))

    def test_non_object_is_rejected(self):
        with pytest.raises(ValueError):
            PostRecord.from_api(['not', 'a', 'post'])


class TestExportSettings:
    """Test settings built from configuration dictionaries."""

    def test_defaults(self):
        settings = ExportSettings.from_config({'wordpress': {'url': 'https://blog.example.com/'}})

        assert settings.site_url == 'https://blog.example.com'
        assert settings.output_directory == 'blog_export'
        assert settings.images_directory == 'blog_export/images'
        assert settings.preserve_tags == ('iframe', 'script')
        assert settings.code_classes == ()
        assert settings.plugins == ()
        assert settings.limit is None
        assert settings.post_type == 'posts'

    def test_custom_values(self):
        settings = ExportSettings.from_config({
            'wordpress': {'url': 'https://blog.example.com', 'custom_post_type': 'recipes'},
            'export': {
                'limit': 5,
                'code_classes': ['EnlighterJSRAW'],
                'preserve_tags': [],
                'plugins': ['Yoast', 'ExampleFixPaths'],
            },
            'advanced': {'request_timeout': 10, 'rate_limit': 0.5},
        })

        assert settings.post_type == 'recipes'
        assert settings.limit == 5
        assert settings.code_classes == ('EnlighterJSRAW',)
        assert settings.preserve_tags == ()
        assert settings.plugins == ('Yoast', 'ExampleFixPaths')
        assert settings.request_timeout == 10
        assert settings.rate_limit == 0.5
