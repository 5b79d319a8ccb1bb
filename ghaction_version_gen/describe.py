"""
Parsing of ``git describe --tags`` output.

``git describe --tags`` prints either a bare tag (HEAD is exactly on the tag)
or ``<tag>-<distance>-g<hash>``. A tag name that itself ends in the
``-<digits>-g<hex>`` shape cannot be told apart from a real suffix and is
parsed as one.
"""

import re
from typing import Optional

from .models import ParsedDescribe

# Greedy tag group so that dashes inside the tag name stay in the tag
DESCRIBE_RE = re.compile(r'^(?P<tag_latest>.*)-(?P<distance>\d+)-g(?P<commit>[0-9a-f]+)$')


def parse_describe(describe: str) -> ParsedDescribe:
    """
    Split describe output into latest tag, distance and head tag.

    Args:
        describe: Raw output of ``git describe --tags``

    Returns:
        ParsedDescribe: tag_head is set only when HEAD sits on the tag

    Examples:
        >>> parse_describe("1.3.1-20-gc5f7a99").distance
        '20'
        >>> parse_describe("v1.0.0").tag_head
        'v1.0.0'
    """
    match = DESCRIBE_RE.match(describe)
    if match:
        return ParsedDescribe(
            describe=describe,
            tag_latest=match.group('tag_latest'),
            distance=match.group('distance'),
        )
    return ParsedDescribe(
        describe=describe,
        tag_latest=describe,
        distance='0',
        tag_head=describe,
    )


def ltrimv(value: Optional[str]) -> Optional[str]:
    """Remove exactly one leading "v", passing None through."""
    if value is None:
        return None
    if value.startswith('v'):
        return value[1:]
    return value
