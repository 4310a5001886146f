"""Asset resolver for downloading post images and rewriting their references."""

import logging
import posixpath
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Set
from urllib.parse import unquote, urlparse

from bs4 import BeautifulSoup

from models import AssetResolution
from .byte_store import ByteStore
from .filenames import sanitize_filename


class AssetResolver:
    """
    Localizes the images referenced by a post body.

    For each post this resolver:
    1. Collects every <img src> in document order
    2. Downloads each unique URL once through the byte store
    3. Saves it under <images_directory>/<post slug>/<file name>
    4. Rewrites <img src> and <a href> pointing at a downloaded URL
    5. Returns the rewritten HTML with the URL -> local path mapping

    A failed image is logged and left pointing at its original URL.
    """

    def __init__(
        self,
        byte_store: ByteStore,
        images_directory: str,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the asset resolver.

        Args:
            byte_store: Store used to fetch and persist image bytes
            images_directory: Namespace all image paths are created under
            logger: Logger instance
        """
        self.byte_store = byte_store
        self.images_directory = images_directory.rstrip('/') or '.'
        self.logger = logger or logging.getLogger('wordpress_markdown_exporter.exporters.asset_resolver')

    def resolve_assets(self, html: str, post_slug: str) -> AssetResolution:
        """
        Download the images of a post body and rewrite their references.

        Args:
            html: Post body HTML fragment
            post_slug: Slug of the post, used as the image sub-directory

        Returns:
            AssetResolution with the rewritten HTML and a read-only asset mapping
        """
        if not html:
            return AssetResolution(html=html or '', asset_mapping=MappingProxyType({}))

        soup = BeautifulSoup(html, 'html.parser')
        images = [img for img in soup.find_all('img') if img.get('src')]

        urls: List[str] = []
        for img in images:
            if img['src'] not in urls:
                urls.append(img['src'])

        # Resolve every URL before touching the tree
        mapping: Dict[str, str] = {}
        used_paths: Set[str] = set()
        for url in urls:
            local_path = self._download(url, post_slug, used_paths)
            if local_path:
                mapping[url] = local_path
                used_paths.add(local_path)

        if not mapping:
            if urls:
                self.logger.info(f"Downloaded 0/{len(urls)} images for post: {post_slug}")
            return AssetResolution(html=html, asset_mapping=MappingProxyType({}))

        for img in images:
            if img['src'] in mapping:
                img['src'] = mapping[img['src']]

        for link in soup.find_all('a', href=True):
            href = link['href']
            if href in mapping:
                link['href'] = mapping[href]
                self.logger.debug(f"Updated link: {href} -> {mapping[href]}")

        self.logger.info(f"Downloaded {len(mapping)}/{len(urls)} images for post: {post_slug}")

        return AssetResolution(html=str(soup), asset_mapping=MappingProxyType(mapping))

    def resolve_featured_image(
        self,
        media_url: Optional[str],
        asset_mapping: Mapping[str, str],
        post_slug: str
    ) -> Optional[str]:
        """
        Resolve the featured image of a post, reusing a body download when possible.

        Args:
            media_url: Source URL of the featured media (None if the post has none)
            asset_mapping: Mapping produced by resolve_assets for the same post
            post_slug: Slug of the post

        Returns:
            Local path of the image, or None when absent or the download failed
        """
        if not media_url:
            return None

        if media_url in asset_mapping:
            self.logger.debug(f"Featured image already downloaded: {media_url}")
            return asset_mapping[media_url]

        return self._download(media_url, post_slug, set(asset_mapping.values()))

    def local_path(self, url: str, post_slug: str, used_paths: Optional[Set[str]] = None) -> str:
        """
        Build the local path for an image URL.

        Args:
            url: Image URL
            post_slug: Slug of the post
            used_paths: Paths already taken by other URLs of the same post

        Returns:
            Relative POSIX path under the images directory
        """
        filename = sanitize_filename(
            unquote(posixpath.basename(urlparse(url).path)),
            fallback='image'
        )
        directory = posixpath.join(self.images_directory, sanitize_filename(post_slug, fallback='post'))
        path = posixpath.join(directory, filename)

        # Different URLs with the same file name get a numeric suffix
        counter = 1
        stem, suffix = posixpath.splitext(filename)
        while used_paths and path in used_paths:
            path = posixpath.join(directory, f"{stem}_{counter}{suffix}")
            counter += 1

        return path

    def _download(self, url: str, post_slug: str, used_paths: Set[str]) -> Optional[str]:
        """Fetch and persist one image, returning its local path or None on failure."""
        try:
            content = self.byte_store.fetch_bytes(url)
            local_path = self.local_path(url, post_slug, used_paths)
            self.byte_store.write_bytes(local_path, content)
        except Exception as e:
            self.logger.warning(f"Failed to download image {url}: {e}")
            return None

        self.logger.debug(f"Saved image {url} -> {local_path}")
        return local_path


__all__ = ['AssetResolver']
