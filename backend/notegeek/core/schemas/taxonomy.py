from __future__ import annotations

from notegeek.core.models.base import AppBaseModel


class TagNode(AppBaseModel):
    """One segment of the tag hierarchy.

    - count: how many tag occurrences pass through this segment
    - children: nested segments, or None at a leaf
    """

    count: int = 0
    children: dict[str, TagNode] | None = None


TagNode.model_rebuild()
