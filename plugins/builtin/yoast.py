from typing import Any, Dict

from models import PostRecord
from plugins.base import Plugin


class YoastPlugin(Plugin):
    """Uses the Yoast SEO description as the excerpt."""

    name = 'Yoast'

    def process_front_matter(self, document: Dict[str, Any], post: PostRecord) -> Dict[str, Any]:
        yoast = post.raw.get('yoast_head_json')
        if not isinstance(yoast, dict):
            return document

        # Plain text, unlike the rendered excerpt
        return {**document, 'excerpt': yoast.get('description')}
