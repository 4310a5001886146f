"""Tests for the plugin pipeline, registry and builtin plugins."""

import textwrap

import pytest

from models import PostRecord
from plugins import (
    Plugin,
    PluginError,
    PluginLoadError,
    PluginNotFoundError,
    PluginPipeline,
    PluginRegistry,
    is_plugin,
)
from plugins.builtin.example_fix_paths import ExampleFixPathsPlugin
from plugins.builtin.yoast import YoastPlugin


class Suffix(Plugin):
    """Appends its name to every value it sees."""

    def __init__(self, name):
        self.name = name

    def process_front_matter(self, document, post):
        return {**document, 'trail': document.get('trail', '') + self.name}

    def process_html(self, html, asset_mapping):
        return html + self.name

    def process_markdown(self, markdown):
        return markdown + self.name


class Mutating(Plugin):
    name = 'Mutating'

    def process_front_matter(self, document, post):
        document['tags'].append('changed')
        document['title'] = 'changed'
        return document


class Failing(Plugin):
    name = 'Failing'

    def process_markdown(self, markdown):
        raise RuntimeError('boom')


class WrongType(Plugin):
    name = 'WrongType'

    def process_html(self, html, asset_mapping):
        return None


@pytest.fixture
def post(raw_post):
    return PostRecord.from_api(raw_post)


class TestPluginPipeline:
    """Test left-to-right folding of plugin hooks."""

    def test_markdown_is_folded_left_to_right(self):
        a, b = Suffix('A'), Suffix('B')
        pipeline = PluginPipeline([a, b])

        result = pipeline.process_markdown('base')

        assert result == b.process_markdown(a.process_markdown('base'))
        assert result == 'baseAB'

    def test_html_and_front_matter_follow_plugin_order(self, post):
        pipeline = PluginPipeline([Suffix('B'), Suffix('A')])

        assert pipeline.process_html('<p>x</p>', {}) == '<p>x</p>BA'
        assert pipeline.process_front_matter({'title': 't'}, post)['trail'] == 'BA'

    def test_empty_pipeline_passes_through(self, post):
        pipeline = PluginPipeline()
        document = {'title': 't'}

        assert pipeline.process_markdown('text') == 'text'
        assert pipeline.process_front_matter(document, post) == document

    def test_hooks_cannot_change_previous_documents(self, post):
        document = {'title': 'original', 'tags': ['a']}

        result = PluginPipeline([Mutating()]).process_front_matter(document, post)

        assert document == {'title': 'original', 'tags': ['a']}
        assert result == {'title': 'changed', 'tags': ['a', 'changed']}

    def test_failing_hook_is_reported_with_plugin_and_hook(self):
        pipeline = PluginPipeline([Suffix('A'), Failing()])

        with pytest.raises(PluginError) as exc_info:
            pipeline.process_markdown('base')

        assert exc_info.value.plugin_name == 'Failing'
        assert exc_info.value.hook == 'process_markdown'
        assert 'boom' in str(exc_info.value)

    def test_wrong_return_type_is_rejected(self):
        with pytest.raises(PluginError, match='expected str'):
            PluginPipeline([WrongType()]).process_html('<p></p>', {})

    def test_duplicate_names_are_rejected(self):
        with pytest.raises(ValueError, match='Duplicate'):
            PluginPipeline([Suffix('A'), Suffix('A')])


class TestBuiltinPlugins:
    """Test the plugins shipped with the exporter."""

    def test_yoast_replaces_excerpt(self, make_raw_post):
        raw = make_raw_post(yoast_head_json={'description': 'Plain SEO text'})
        post = PostRecord.from_api(raw)
        document = {'title': 'T', 'excerpt': '<p>Rendered</p>', 'original_url': 'u'}

        result = YoastPlugin().process_front_matter(document, post)

        assert result == {'title': 'T', 'excerpt': 'Plain SEO text', 'original_url': 'u'}
        assert document['excerpt'] == '<p>Rendered</p>'

    def test_yoast_without_seo_data(self, post):
        document = {'excerpt': '<p>Rendered</p>'}

        assert YoastPlugin().process_front_matter(document, post) == document

    def test_example_fix_paths(self, post):
        plugin = ExampleFixPathsPlugin()

        markdown = plugin.process_markdown('![a](static/images/blogs/a.png) static/images/blogs/b.png')
        document = plugin.process_front_matter(
            {'featured_image': 'static/images/blogs/post/cover.jpg'}, post
        )

        assert markdown == '![a](/images/blogs/a.png) /images/blogs/b.png'
        assert document['featured_image'] == '/images/blogs/post/cover.jpg'
        assert plugin.process_front_matter({'title': 'T'}, post) == {'title': 'T'}
        assert plugin.process_html('<p>static/images/blogs/</p>', {}) == '<p>static/images/blogs/</p>'


class TestPluginRegistry:
    """Test plugin discovery and name resolution."""

    def test_discover_builtin(self):
        registry = PluginRegistry()

        count = registry.discover_builtin()

        assert count == 2
        assert registry.available() == ['ExampleFixPaths', 'Yoast']

    def test_resolve_preserves_requested_order(self):
        registry = PluginRegistry()
        registry.discover_builtin()

        plugins = registry.resolve(['Yoast', 'ExampleFixPaths'])

        assert [plugin.name for plugin in plugins] == ['Yoast', 'ExampleFixPaths']

    def test_resolve_missing_plugin(self):
        registry = PluginRegistry()
        registry.discover_builtin()

        with pytest.raises(PluginNotFoundError) as exc_info:
            registry.resolve(['Yoast', 'Missing'])

        assert exc_info.value.missing == ['Missing']
        assert 'Available plugins: ExampleFixPaths, Yoast' in str(exc_info.value)

    def test_register_rejects_invalid_and_duplicate_plugins(self):
        class NoHooks:
            name = 'NoHooks'

        registry = PluginRegistry()

        assert registry.register(Suffix('A')) is True
        assert registry.register(Suffix('A')) is False
        assert registry.register(NoHooks()) is False
        assert registry.register(Suffix('')) is False
        assert registry.available() == ['A']

    def test_is_plugin_shape_check(self):
        assert is_plugin(YoastPlugin())
        assert not is_plugin(object())

    def test_load_directory(self, tmp_path):
        (tmp_path / 'upper.py').write_text(textwrap.dedent('''
            class UpperPlugin:
                name = 'Upper'

                def process_front_matter(self, document, post):
                    return document

                def process_html(self, html, asset_mapping):
                    return html

                def process_markdown(self, markdown):
                    return markdown.upper()


            class Helper:
                pass
        '''))
        (tmp_path / 'notes.txt').write_text('not a plugin')

        registry = PluginRegistry()

        assert registry.load_directory(tmp_path) == 1
        assert registry.resolve(['Upper'])[0].process_markdown('abc') == 'ABC'

    def test_missing_directory_is_skipped(self, tmp_path):
        registry = PluginRegistry()

        assert registry.load_directory(tmp_path / 'nope') == 0

    def test_broken_plugin_file(self, tmp_path):
        (tmp_path / 'broken.py').write_text('def oops(:\n')

        with pytest.raises(PluginLoadError, match='broken.py'):
            PluginRegistry().load_directory(tmp_path)
