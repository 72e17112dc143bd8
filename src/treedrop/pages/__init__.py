"""NiceGUI pages for treedrop.

Import this module to register all page routes with NiceGUI.
"""

from treedrop.pages import tree_table

__all__ = ["tree_table"]
