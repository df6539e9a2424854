"""Optional text splitting applied by the item extractors."""

from __future__ import annotations

from typing import TYPE_CHECKING

from langchain_text_splitters import RecursiveCharacterTextSplitter

if TYPE_CHECKING:
    from langchain_core.documents import Document
    from langchain_text_splitters import TextSplitter


def build_text_splitter(chunk_size: int = 1000, chunk_overlap: int = 200) -> TextSplitter:
    """Return a recursive character splitter.

    Parameters
    ----------
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.
    """
    if chunk_overlap >= chunk_size:
        raise ValueError(f"chunk_overlap ({chunk_overlap}) must be smaller than chunk_size ({chunk_size})")
    return RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=["\n\n", "\n", ". ", " ", ""],
    )


def split_documents(documents: list[Document], splitter: TextSplitter | None) -> list[Document]:
    """Split *documents* with *splitter*; no splitter means no splitting."""
    if splitter is None or not documents:
        return documents
    return splitter.split_documents(documents)
