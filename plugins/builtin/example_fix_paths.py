"""Example plugin that rewrites image paths for a static site layout."""

import re
from typing import Any, Dict

from models import PostRecord
from plugins.base import Plugin

STATIC_IMAGES = re.compile(r'static/images/blogs/')


def replace_paths(content: str) -> str:
    return STATIC_IMAGES.sub('/images/blogs/', content)


class ExampleFixPathsPlugin(Plugin):
    """Maps ``static/images/blogs/`` to ``/images/blogs/`` in the body and featured image."""

    name = 'ExampleFixPaths'

    def process_front_matter(self, document: Dict[str, Any], post: PostRecord) -> Dict[str, Any]:
        if document.get('featured_image') is None:
            return document
        return {**document, 'featured_image': replace_paths(document['featured_image'])}

    def process_markdown(self, markdown: str) -> str:
        return replace_paths(markdown)
