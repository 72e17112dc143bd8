"""Tree structure and reorder decisions for the tree table.

Everything here is synchronous and side-effect free apart from warnings
logged while recovering malformed flat data.
"""

from treedrop.tree.drop_result import compute_drop_result
from treedrop.tree.flat import build_tree_from_flat
from treedrop.tree.indicator_store import IndicatorStore
from treedrop.tree.node_map import build_node_map, root_ids, visible_row_ids
from treedrop.tree.records import FlatRecord, TreeDataError, TreeRecord
from treedrop.tree.reorder import apply_reorder

__all__ = [
    "FlatRecord",
    "IndicatorStore",
    "TreeDataError",
    "TreeRecord",
    "apply_reorder",
    "build_node_map",
    "build_tree_from_flat",
    "compute_drop_result",
    "root_ids",
    "visible_row_ids",
]
