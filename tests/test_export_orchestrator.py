"""Tests for the export orchestrator and report."""

import logging
from pathlib import Path

import pytest
import yaml

from exporters import DocumentWriter, LocalByteStore
from models import ExportSettings, PostRecord
from orchestrator import ExportOrchestrator, ExportReport, ExportSetupError
from plugins import Plugin, PluginNotFoundError, PluginRegistry


class FakeSource:
    """Content source returning canned posts."""

    def __init__(self, posts):
        self.posts = posts
        self.calls = []

    def fetch_posts(self, post_type='posts', limit=None):
        self.calls.append((post_type, limit))
        return self.posts[:limit] if limit else list(self.posts)


class ExplodeOnMarker(Plugin):
    name = 'Explode'

    def process_html(self, html, asset_mapping):
        if 'explode' in html:
            raise RuntimeError('conversion exploded')
        return html


def split_document(text):
    """Return the parsed frontmatter and the body of an exported document."""
    _, front, body = text.split('---\n', 2)
    return yaml.safe_load(front), body.lstrip('\n')


@pytest.fixture
def workdir(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    return tmp_path


def build_orchestrator(posts, byte_store, plugins=(), code_classes=(), registry=None):
    settings = ExportSettings(
        site_url='https://blog.example.com',
        code_classes=tuple(code_classes),
        plugins=tuple(plugins),
    )
    if registry is None:
        registry = PluginRegistry()
        registry.discover_builtin()
    return ExportOrchestrator(
        settings=settings,
        source=FakeSource(posts),
        byte_store=byte_store,
        writer=DocumentWriter(settings.output_directory),
        registry=registry,
    )


class TestConvertPost:
    """Test the per-post pipeline."""

    def test_image_post_without_featured_media(self, workdir, make_raw_post, byte_store):
        raw = make_raw_post(content='<img src="http://x/pic.png">')
        orchestrator = build_orchestrator([raw], byte_store)
        orchestrator.initialize()

        front, body = split_document(orchestrator.convert_post(PostRecord.from_api(raw)))

        assert body == '![](blog_export/images/hello-world/pic.png)'
        assert 'featured_image' not in front
        assert front['slug'] == 'hello-world'

    def test_enlighter_block_is_fenced(self, workdir, make_raw_post, byte_store):
        raw = make_raw_post(content='<pre class="EnlighterJSRAW">print(\'hi\')</pre>')
        orchestrator = build_orchestrator([raw], byte_store, code_classes=['EnlighterJSRAW'])
        orchestrator.initialize()

        _, body = split_document(orchestrator.convert_post(PostRecord.from_api(raw)))

        assert body == "```python\nprint('hi')\n```"

    def test_featured_image_reuses_body_download(self, workdir, make_raw_post, byte_store):
        raw = make_raw_post(content='<p><img src="http://x/cover.jpg"></p>')
        raw['_embedded']['wp:featuredmedia'] = [{'source_url': 'http://x/cover.jpg'}]
        orchestrator = build_orchestrator([raw], byte_store)
        orchestrator.initialize()

        front, _ = split_document(orchestrator.convert_post(PostRecord.from_api(raw)))

        assert byte_store.fetched == ['http://x/cover.jpg']
        assert front['featured_image'] == 'blog_export/images/hello-world/cover.jpg'
        assert list(front)[-1] == 'featured_image'

    def test_plugins_adjust_every_stage(self, workdir, make_raw_post, byte_store):
        raw = make_raw_post(
            content='<p>See static/images/blogs/a.png</p>',
            yoast_head_json={'description': 'SEO summary'},
        )
        orchestrator = build_orchestrator([raw], byte_store, plugins=['Yoast', 'ExampleFixPaths'])
        orchestrator.initialize()

        front, body = split_document(orchestrator.convert_post(PostRecord.from_api(raw)))

        assert front['excerpt'] == 'SEO summary'
        assert body == 'See /images/blogs/a.png'


class TestExportRun:
    """Test full runs over several posts."""

    def test_writes_one_document_per_post(self, workdir, make_raw_post, byte_store):
        posts = [make_raw_post(i, f'post-{i}') for i in range(1, 4)]
        orchestrator = build_orchestrator(posts, byte_store)

        report = orchestrator.run()

        assert report.success
        assert report.total == 3
        assert sorted(path.name for path in report.exported) == ['post-1.md', 'post-2.md', 'post-3.md']
        text = (workdir / 'blog_export' / 'post-2.md').read_text(encoding='utf-8')
        assert text.startswith('---\ntitle: Post 2\n')
        assert text.endswith('Hello')
        assert orchestrator.source.calls == [('posts', None)]

    def test_one_failing_post_does_not_stop_the_run(self, workdir, make_raw_post, byte_store):
        posts = [
            make_raw_post(1, 'first'),
            make_raw_post(2, 'second', content='<p>explode</p>'),
            make_raw_post(3, 'third'),
        ]
        registry = PluginRegistry()
        registry.register(ExplodeOnMarker())
        orchestrator = build_orchestrator(posts, byte_store, plugins=['Explode'], registry=registry)

        report = orchestrator.run()

        written = sorted(path.name for path in (workdir / 'blog_export').glob('*.md'))
        assert written == ['first.md', 'third.md']
        assert not report.success
        assert len(report.exported) == 2
        assert report.failures == [
            {'slug': 'second', 'error': "Plugin 'Explode' failed in process_html: RuntimeError: conversion exploded"}
        ]

    def test_invalid_post_record_is_reported(self, workdir, make_raw_post, byte_store):
        orchestrator = build_orchestrator([make_raw_post(1, ''), make_raw_post(2, 'ok')], byte_store)

        report = orchestrator.run()

        assert len(report.exported) == 1
        assert report.failures[0]['slug'] == ''

    def test_unknown_plugin_is_fatal(self, workdir, byte_store):
        orchestrator = build_orchestrator([], byte_store, plugins=['Missing'])

        with pytest.raises(PluginNotFoundError):
            orchestrator.run()

        assert orchestrator.source.calls == []

    def test_output_directory_that_is_a_file(self, workdir, byte_store):
        (workdir / 'blog_export').write_text('not a directory')
        orchestrator = build_orchestrator([], byte_store)

        with pytest.raises(ExportSetupError):
            orchestrator.initialize()

    def test_images_written_to_disk(self, workdir, make_raw_post):
        store = LocalByteStore(lambda url: b'image-bytes')
        raw = make_raw_post(content='<img src="http://x/pic.png">')
        orchestrator = build_orchestrator([raw], store)

        report = orchestrator.run()

        assert report.success
        assert (workdir / 'blog_export/images/hello-world/pic.png').read_bytes() == b'image-bytes'

    def test_no_posts(self, workdir, byte_store):
        report = build_orchestrator([], byte_store).run()

        assert report.success
        assert report.total == 0

    def test_report_is_logged_at_debug(self, workdir, make_raw_post, byte_store, caplog):
        caplog.set_level(logging.DEBUG, logger='wordpress_markdown_exporter.orchestrator')

        build_orchestrator([make_raw_post()], byte_store).run()

        assert "'exported': 1" in caplog.text
        assert "'failed': 0" in caplog.text


class TestExportReport:
    """Test the run summary."""

    def test_counts(self):
        report = ExportReport(total=2)
        report.add_exported(Path('blog_export/a.md'))
        report.add_failure('b', 'boom')

        assert not report.success
        assert report.to_dict()['exported'] == 1
        assert report.to_dict()['failed'] == 1
        assert report.to_dict()['failures'] == [{'slug': 'b', 'error': 'boom'}]
