from collections import Counter
from typing import Dict

from leave_portal.schemas.admin import HierarchyNode
from leave_portal.services.api_client import LeaveApiClient, parse_body


async def fetch_hierarchy(client: LeaveApiClient) -> HierarchyNode:
    return parse_body(HierarchyNode, await client.hierarchy_tree(), "Failed to load hierarchy")


def count_by_type(root: HierarchyNode) -> Dict[str, int]:
    """Node counts per type, root included."""
    counts: Counter = Counter()
    stack = [root]
    while stack:
        node = stack.pop()
        counts[node.type] += 1
        stack.extend(node.children)
    return dict(counts)
