"""
Data Tables.

A Data page holds the numeric and text fields a model consumes or produces:
- vector: 1-D float array (or None)
- matrix: 2-D float array (or None)
- text, rownames, colnames, title: bookkeeping
- weights: optional per-row weights
- more: the next page in the chain (or None)

Pages chain through `more`. Parameter tables are packed into a single flat
vector for the samplers and unpacked back afterwards:
- pack / unpack: flat buffer <-> structured pages
- add_page / get_page: page chain management
- data_memcpy: copy values into an existing table of the same shape
"""

from dataclasses import dataclass, field
from typing import List, Optional

import numpy as np


@dataclass(eq=False)
class Data:
    """
    One page of a data table.

    Fields:
        vector: 1-D float array, or None
        matrix: 2-D float array, or None
        text: List of text rows
        rownames: Row labels
        colnames: Column labels
        title: Page title (used to look up auxiliary pages)
        weights: Optional 1-D array of row weights
        more: Next page in the chain
    """
    vector: Optional[np.ndarray] = None
    matrix: Optional[np.ndarray] = None
    text: List[List[str]] = field(default_factory=list)
    rownames: List[str] = field(default_factory=list)
    colnames: List[str] = field(default_factory=list)
    title: str = ""
    weights: Optional[np.ndarray] = None
    more: Optional['Data'] = None

    def __post_init__(self):
        if self.vector is not None:
            self.vector = np.atleast_1d(np.asarray(self.vector, dtype=np.float64))
        if self.matrix is not None:
            self.matrix = np.asarray(self.matrix, dtype=np.float64)
            if self.matrix.ndim == 1:
                self.matrix = self.matrix.reshape(-1, 1)
            if self.matrix.ndim != 2:
                raise ValueError(f"matrix must be 2-D, got shape {self.matrix.shape}")
        if self.weights is not None:
            self.weights = np.atleast_1d(np.asarray(self.weights, dtype=np.float64))

    @classmethod
    def alloc(cls, vsize: int = 0, msize1: int = 0, msize2: int = 0) -> 'Data':
        """Allocate a zero-filled page. Sizes of zero leave the field as None."""
        vector = np.zeros(vsize) if vsize > 0 else None
        matrix = np.zeros((msize1, msize2)) if msize1 > 0 and msize2 > 0 else None
        return cls(vector=vector, matrix=matrix)

    def copy(self) -> 'Data':
        """Deep copy of this page and every page chained after it."""
        return Data(
            vector=None if self.vector is None else self.vector.copy(),
            matrix=None if self.matrix is None else self.matrix.copy(),
            text=[list(row) for row in self.text],
            rownames=list(self.rownames),
            colnames=list(self.colnames),
            title=self.title,
            weights=None if self.weights is None else self.weights.copy(),
            more=None if self.more is None else self.more.copy(),
        )

    def pages(self, all_pages: bool = True):
        """Iterate over this page and, if requested, the pages after it."""
        page = self
        while page is not None:
            yield page
            if not all_pages:
                return
            page = page.more

    def numeric_values(self) -> np.ndarray:
        """All vector and matrix entries of this page, flattened."""
        parts = []
        if self.vector is not None:
            parts.append(self.vector.ravel())
        if self.matrix is not None:
            parts.append(self.matrix.ravel())
        if not parts:
            return np.zeros(0)
        return np.concatenate(parts)

    def total_size(self, all_pages: bool = False) -> int:
        """Number of numeric entries (vector + matrix)."""
        return sum(_page_size(page) for page in self.pages(all_pages))

    @property
    def n_rows(self) -> int:
        if self.matrix is not None:
            return self.matrix.shape[0]
        if self.vector is not None:
            return self.vector.shape[0]
        return 0


def _page_size(page: Data) -> int:
    size = 0
    if page.vector is not None:
        size += page.vector.size
    if page.matrix is not None:
        size += page.matrix.size
    return size


def pack(data: Data, all_pages: bool = False) -> np.ndarray:
    """
    Flatten a table into one vector: vector first, then matrix row by row.

    Args:
        data: Table to pack
        all_pages: Also pack every page chained through `more`

    Returns:
        1-D float64 array of length data.total_size(all_pages)
    """
    parts = [page.numeric_values() for page in data.pages(all_pages)]
    if not parts:
        return np.zeros(0)
    return np.concatenate(parts)


def unpack(vec, data: Data, all_pages: bool = False) -> Data:
    """
    Fill a table's fields in place from a flat vector (inverse of pack).

    Raises:
        ValueError: If the vector length does not match the table
    """
    vec = np.asarray(vec, dtype=np.float64).ravel()
    expected = data.total_size(all_pages)
    if vec.size != expected:
        raise ValueError(f"Cannot unpack {vec.size} values into a table of size {expected}")
    posn = 0
    for page in data.pages(all_pages):
        if page.vector is not None:
            n = page.vector.size
            page.vector[:] = vec[posn:posn + n]
            posn += n
        if page.matrix is not None:
            n = page.matrix.size
            page.matrix[:, :] = vec[posn:posn + n].reshape(page.matrix.shape)
            posn += n
    return data


def data_memcpy(dst: Data, src: Data) -> Data:
    """Copy the numeric fields of src (all pages) into the existing dst."""
    return unpack(pack(src, all_pages=True), dst, all_pages=True)


def add_page(data: Data, page: Data, title: str) -> Data:
    """Append a page at the end of the chain and return it."""
    page.title = title
    last = data
    while last.more is not None:
        last = last.more
    last.more = page
    return page


def get_page(data: Data, title: str) -> Optional[Data]:
    """Find a page by title (case-insensitive), or None."""
    for page in data.pages():
        if page.title.lower() == title.lower():
            return page
    return None


def as_data(values) -> Optional[Data]:
    """Wrap raw array-like input as a Data page (2-D input goes to matrix)."""
    if values is None or isinstance(values, Data):
        return values
    arr = np.asarray(values, dtype=np.float64)
    if arr.ndim <= 1:
        return Data(vector=arr)
    return Data(matrix=arr)
