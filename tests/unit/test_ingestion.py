"""Unit tests for the ingestion layer — document processor, extractors, chunker."""

from __future__ import annotations

import tempfile

import pytest
from langchain_core.documents import Document

from opensearch_vectorstore.errors import ConfigurationError, DocumentValidationError
from opensearch_vectorstore.ingestion.chunker import build_text_splitter, split_documents
from opensearch_vectorstore.ingestion.documents import (
    ExtractableDocuments,
    PrebuiltDocuments,
    as_document_source,
    process_document,
)
from opensearch_vectorstore.ingestion.loader import BinaryItemLoader, JsonItemLoader
from opensearch_vectorstore.models import BinaryData, WorkItem


# ── Document processor ─────────────────────────────────────────────────


class TestProcessDocument:
    def test_prebuilt_passes_through_unchanged(self) -> None:
        docs = [Document(page_content="a"), Document(page_content="b")]
        processed = process_document(PrebuiltDocuments(docs), WorkItem(json={"x": "ignored"}), 3)
        assert processed.documents is docs

    def test_prebuilt_same_list_for_every_item(self) -> None:
        docs = [Document(page_content="a")]
        source = PrebuiltDocuments(docs)
        first = process_document(source, WorkItem(), 0)
        second = process_document(source, WorkItem(), 1)
        assert first.documents == second.documents == docs

    def test_extractable_calls_loader_with_item_and_index(self) -> None:
        calls: list[tuple[WorkItem, int]] = []

        class RecordingLoader:
            def process_item(self, item: WorkItem, item_index: int) -> list[Document]:
                calls.append((item, item_index))
                return [Document(page_content="extracted")]

        item = WorkItem(json={"k": "v"})
        processed = process_document(ExtractableDocuments(RecordingLoader()), item, 5)

        assert calls == [(item, 5)]
        assert processed.documents[0].page_content == "extracted"

    def test_echo_one_record_per_document(self) -> None:
        docs = [Document(page_content="a", metadata={"n": 1}), Document(page_content="b")]
        processed = process_document(PrebuiltDocuments(docs), WorkItem(), 2)

        assert [r.paired_item for r in processed.echo] == [2, 2]
        assert processed.echo[0].json == {"metadata": {"n": 1}, "page_content": "a"}

    def test_no_documents_no_echo(self) -> None:
        processed = process_document(PrebuiltDocuments([]), WorkItem(), 0)
        assert processed.echo == []


class TestAsDocumentSource:
    def test_document_list(self) -> None:
        source = as_document_source([Document(page_content="a")])
        assert isinstance(source, PrebuiltDocuments)

    def test_loader(self) -> None:
        loader = JsonItemLoader()
        source = as_document_source(loader)
        assert isinstance(source, ExtractableDocuments)
        assert source.loader is loader

    def test_existing_variant_returned_as_is(self) -> None:
        source = PrebuiltDocuments([])
        assert as_document_source(source) is source

    @pytest.mark.parametrize("raw", [42, "text", [Document(page_content="a"), "b"]])
    def test_rejects_other_values(self, raw) -> None:
        with pytest.raises(ConfigurationError):
            as_document_source(raw)


# ── JSON extractor ─────────────────────────────────────────────────────


class TestJsonItemLoader:
    def test_each_string_leaf_is_a_document(self) -> None:
        item = WorkItem(json={"title": "Hello", "body": {"text": "World", "tags": ["a"]}, "n": 3})
        docs = JsonItemLoader().process_item(item, 0)

        assert [d.page_content for d in docs] == ["Hello", "World", "a"]
        assert [d.metadata["line"] for d in docs] == [1, 2, 3]
        assert docs[0].metadata["source"] == "blob"

    def test_pointers_restrict_extraction(self) -> None:
        item = WorkItem(json={"title": "Hello", "body": {"text": "World"}})
        docs = JsonItemLoader(pointers=["/body/text"]).process_item(item, 0)
        assert [d.page_content for d in docs] == ["World"]

    def test_missing_pointer_yields_nothing(self) -> None:
        docs = JsonItemLoader(pointers=["/missing"]).process_item(WorkItem(json={"a": "b"}), 0)
        assert docs == []

    def test_expression_data_mode(self) -> None:
        loader = JsonItemLoader(mode="expression_data", data_field="content", metadata={"lang": "en"})
        docs = loader.process_item(WorkItem(json={"content": "One whole text.", "x": "y"}), 0)

        assert len(docs) == 1
        assert docs[0].page_content == "One whole text."
        assert docs[0].metadata == {"lang": "en"}

    def test_expression_data_serialises_non_strings(self) -> None:
        loader = JsonItemLoader(mode="expression_data")
        docs = loader.process_item(WorkItem(json={"data": {"a": 1}}), 0)
        assert docs[0].page_content == '{"a": 1}'

    def test_static_metadata_merged(self) -> None:
        docs = JsonItemLoader(metadata={"tenant": "acme"}).process_item(WorkItem(json={"a": "b"}), 0)
        assert docs[0].metadata["tenant"] == "acme"

    def test_text_splitter_applied(self) -> None:
        loader = JsonItemLoader(text_splitter=build_text_splitter(chunk_size=50, chunk_overlap=0))
        docs = loader.process_item(WorkItem(json={"text": "word " * 60}), 0)
        assert len(docs) > 1
        assert all(d.metadata["line"] == 1 for d in docs)


# ── Binary extractor ───────────────────────────────────────────────────


class TestBinaryItemLoader:
    def test_text_attachment(self) -> None:
        item = WorkItem(
            binary={"data": BinaryData(data=b"plain text body", mime_type="text/plain", file_name="a.txt")}
        )
        docs = BinaryItemLoader().process_item(item, 0)

        assert len(docs) == 1
        assert docs[0].page_content == "plain text body"
        assert docs[0].metadata["source"] == "a.txt"
        assert docs[0].metadata["blob_type"] == "text/plain"

    def test_csv_attachment_one_document_per_row(self) -> None:
        item = WorkItem(binary={"file": BinaryData(data=b"name,age\nann,31\nbob,42\n", mime_type="text/csv")})
        docs = BinaryItemLoader(binary_property="file").process_item(item, 0)

        assert len(docs) == 2
        assert "ann" in docs[0].page_content
        assert docs[1].metadata["row"] == 1

    def test_missing_binary_property(self) -> None:
        with pytest.raises(DocumentValidationError, match="not found") as exc_info:
            BinaryItemLoader().process_item(WorkItem(json={}), 4)
        assert exc_info.value.item_index == 4

    def test_unsupported_mime_type(self) -> None:
        item = WorkItem(binary={"data": BinaryData(data=b"\x00\x01", mime_type="image/png")})
        with pytest.raises(DocumentValidationError, match="Unsupported MIME type"):
            BinaryItemLoader().process_item(item, 0)

    @pytest.fixture()
    def isolated_tmp(self, tmp_path, monkeypatch):
        monkeypatch.setattr(tempfile, "tempdir", str(tmp_path))
        return tmp_path

    def test_temp_file_removed_after_load(self, isolated_tmp) -> None:
        item = WorkItem(binary={"data": BinaryData(data=b"body", mime_type="text/plain")})
        BinaryItemLoader().process_item(item, 0)
        assert list(isolated_tmp.iterdir()) == []

    def test_temp_file_removed_for_unsupported_type(self, isolated_tmp) -> None:
        item = WorkItem(binary={"data": BinaryData(data=b"\x00", mime_type="image/png")})
        with pytest.raises(DocumentValidationError):
            BinaryItemLoader().process_item(item, 0)
        assert list(isolated_tmp.iterdir()) == []

    def test_temp_file_removed_when_write_fails(self, isolated_tmp) -> None:
        item = WorkItem(binary={"data": BinaryData(data="not bytes", mime_type="text/plain")})
        with pytest.raises(TypeError):
            BinaryItemLoader().process_item(item, 0)
        assert list(isolated_tmp.iterdir()) == []


# ── Chunker ────────────────────────────────────────────────────────────


class TestChunker:
    def test_no_splitter_returns_input(self) -> None:
        docs = [Document(page_content="x" * 5000)]
        assert split_documents(docs, None) is docs

    def test_splits_long_text_and_keeps_metadata(self) -> None:
        docs = [Document(page_content="word " * 500, metadata={"source": "test.md"})]
        chunks = split_documents(docs, build_text_splitter(chunk_size=256, chunk_overlap=32))
        assert len(chunks) > 1
        assert all(c.metadata["source"] == "test.md" for c in chunks)

    def test_overlap_must_be_smaller_than_chunk(self) -> None:
        with pytest.raises(ValueError, match="chunk_overlap"):
            build_text_splitter(chunk_size=100, chunk_overlap=100)
