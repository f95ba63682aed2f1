"""
Exceptions raised by the BVH importer.
"""

from typing import Optional


class BVHImportError(ValueError):
    """
    Raised when a BVH file cannot be imported.

    Import is all-or-nothing: whenever this is raised no model is returned.

    Attributes:
        token_index: Index of the offending token, if known
        source: Path or name of the data being imported, if known
    """

    def __init__(self, message: str, token_index: Optional[int] = None, source: Optional[str] = None):
        self.token_index = token_index
        self.source = source
        super().__init__(message)

    def __str__(self):
        msg = super().__str__()
        if self.token_index is not None:
            msg = f"{msg} (token {self.token_index})"
        if self.source:
            msg = f"{self.source}: {msg}"
        return msg
