"""
Export orchestrator for coordinating the per-post export pipeline.

For every post fetched from WordPress the orchestrator runs:
Assets → HTML hooks → Markdown → Markdown hooks → Frontmatter → Frontmatter
hooks → Document. A failure in one post is logged and reported; the run
continues with the next post.
"""

import logging
import time
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from tqdm import tqdm

from converters import build_converter
from exporters import (
    AssetResolver,
    ByteStore,
    DocumentWriter,
    FrontmatterAssembler,
    LocalByteStore,
    render_frontmatter,
)
from logger import ProgressTracker, log_section
from models import ExportSettings, PostRecord
from plugins import PluginPipeline, PluginRegistry
from wordpress_client import WordPressClient
from .export_report import ExportReport


class ExportSetupError(Exception):
    """Exception for failures preparing the export (directories, plugins)."""
    pass


class ExportOrchestrator:
    """Central coordinator of a WordPress to Markdown export run."""

    def __init__(
        self,
        settings: ExportSettings,
        source,
        byte_store: ByteStore,
        writer: DocumentWriter,
        registry: PluginRegistry,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the export orchestrator.

        Args:
            settings: Export settings
            source: Content source exposing fetch_posts(post_type, limit)
            byte_store: Store used to download and save images
            writer: Document writer for the Markdown files
            registry: Registry the configured plugins are resolved from
            logger: Optional logger instance
        """
        self.settings = settings
        self.source = source
        self.byte_store = byte_store
        self.writer = writer
        self.registry = registry
        self.logger = logger or logging.getLogger('wordpress_markdown_exporter.orchestrator')

        self.asset_resolver = AssetResolver(byte_store, settings.images_directory, logger=self.logger)
        self.converter = build_converter(settings)
        self.frontmatter = FrontmatterAssembler(settings.site_url, self.asset_resolver)
        self.pipeline = PluginPipeline()

    @classmethod
    def from_settings(cls, settings: ExportSettings, logger: Optional[logging.Logger] = None) -> 'ExportOrchestrator':
        """
        Create an orchestrator wired to WordPress and the local filesystem.

        Builtin plugins and the configured plugin directories are loaded here.

        Raises:
            PluginLoadError: If a plugin file cannot be imported
        """
        client = WordPressClient.from_settings(settings)

        registry = PluginRegistry()
        registry.discover_builtin()
        for directory in settings.plugin_directories:
            registry.load_directory(directory)

        return cls(
            settings=settings,
            source=client,
            byte_store=LocalByteStore(client.download_media),
            writer=DocumentWriter(settings.output_directory),
            registry=registry,
            logger=logger,
        )

    def initialize(self) -> None:
        """
        Create the output directories and resolve the configured plugins.

        Raises:
            ExportSetupError: If a directory cannot be created
            PluginNotFoundError: If a configured plugin is not registered
        """
        for directory in (self.settings.output_directory, self.settings.images_directory):
            try:
                Path(directory).mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise ExportSetupError(f"Cannot create directory {directory}: {e}") from e

        self.pipeline = PluginPipeline(self.registry.resolve(self.settings.plugins), logger=self.logger)
        if self.pipeline.plugins:
            self.logger.info(f"Plugins: {', '.join(self.pipeline.names)}")

    def convert_post(self, post: PostRecord) -> str:
        """
        Convert a post to a complete Markdown document.

        Args:
            post: Post to convert

        Returns:
            Frontmatter block followed by the Markdown body
        """
        resolution = self.asset_resolver.resolve_assets(post.content, post.slug)

        html = self.pipeline.process_html(resolution.html, resolution.asset_mapping)
        markdown = self.pipeline.process_markdown(self.converter.convert(html))

        document = self.frontmatter.assemble(post, resolution.asset_mapping)
        document = self.pipeline.process_front_matter(document, post)

        return render_frontmatter(document) + markdown

    def export_posts(self, raw_posts: Iterable[Dict[str, Any]]) -> ExportReport:
        """
        Convert and write every post, continuing past failures.

        Args:
            raw_posts: Post objects as returned by the REST API

        Returns:
            ExportReport for the batch
        """
        posts: List[Dict[str, Any]] = list(raw_posts)
        report = ExportReport(total=len(posts))
        start_time = time.time()

        if not posts:
            self.logger.warning("No posts to export")
            return report

        log_section("Converting posts to Markdown")

        with ProgressTracker(total_items=len(posts), item_type='posts') as tracker:
            # disable=None turns the bar off when not attached to a TTY
            for raw in tqdm(posts, desc="Exporting posts", unit="post", disable=None):
                slug = raw.get('slug', '?') if isinstance(raw, dict) else '?'
                try:
                    post = PostRecord.from_api(raw)
                    self.logger.info(f"Processing post: {post.slug}")
                    text = self.convert_post(post)
                    path = self.writer.write_document(self.writer.document_path(post), text)
                except Exception as e:
                    self.logger.error(f"Failed to export post '{slug}': {e}")
                    self.logger.debug("Post failure details", exc_info=True)
                    report.add_failure(slug, str(e))
                    tracker.increment(success=False)
                    continue

                report.add_exported(path)
                tracker.increment(success=True)

        report.duration = time.time() - start_time
        return report

    def run(self) -> ExportReport:
        """
        Execute the complete export.

        Returns:
            ExportReport of the run

        Raises:
            ExportSetupError, PluginNotFoundError: On setup failure
            WordPressApiError: If the posts cannot be fetched
        """
        start_time = time.time()

        self.initialize()

        log_section(f"Fetching {self.settings.post_type} from {self.settings.site_url}")
        posts = self.source.fetch_posts(self.settings.post_type, self.settings.limit)

        report = self.export_posts(posts)
        report.duration = time.time() - start_time
        report.log_summary(self.logger)
        self.logger.debug(f"Export report: {report.to_dict()}")

        return report


__all__ = ['ExportOrchestrator', 'ExportSetupError']
