"""Search dialog capability — one interface, lexical or vector implementation."""

from docsearch.dialog.base import ResultsCallback, SearchDialog
from docsearch.dialog.lexical import LexicalSearchDialog
from docsearch.dialog.vector import VectorSearchDialog
from docsearch.dialog.factory import create_search_dialog

__all__ = [
    "ResultsCallback",
    "SearchDialog",
    "LexicalSearchDialog",
    "VectorSearchDialog",
    "create_search_dialog",
]
