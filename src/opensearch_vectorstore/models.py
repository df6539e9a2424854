"""Domain models for work items, output records, and node configuration."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, PositiveInt, model_validator


# ---------------------------------------------------------------------------
# Items flowing through the workflow (plain dataclasses, like the host's wire shape)
# ---------------------------------------------------------------------------


@dataclass
class BinaryData:
    """A binary attachment on a work item.

    Attributes
    ----------
    data:
        Raw file content.
    mime_type:
        MIME type used to pick a document loader (e.g. ``application/pdf``).
    file_name:
        Original file name, when known.
    """

    data: bytes
    mime_type: str = "application/octet-stream"
    file_name: str | None = None


@dataclass
class WorkItem:
    """One unit of workflow input.

    The item's position in the input list is its *item index*; the index is
    the only key correlating output records back to their input.
    """

    json: dict[str, Any] = field(default_factory=dict)
    binary: dict[str, BinaryData] | None = None


@dataclass
class OutputRecord:
    """One unit of workflow output, tagged with its originating item index."""

    json: dict[str, Any]
    paired_item: int

    def to_dict(self) -> dict[str, Any]:
        return {"json": self.json, "pairedItem": {"item": self.paired_item}}


# ---------------------------------------------------------------------------
# Connection + index schema
# ---------------------------------------------------------------------------


class ConnectionConfig(BaseModel):
    """Credentials and transport policy for the OpenSearch cluster."""

    base_url: str = Field(validation_alias=AliasChoices("base_url", "baseUrl"))
    username: str = ""
    password: str = ""
    ignore_ssl_issues: bool = Field(
        default=False, validation_alias=AliasChoices("ignore_ssl_issues", "ignoreSSLIssues")
    )

    @classmethod
    def from_settings(cls, settings: Any) -> ConnectionConfig:
        return cls(
            base_url=settings.opensearch_url,
            username=settings.opensearch_username,
            password=settings.opensearch_password,
            ignore_ssl_issues=settings.opensearch_ignore_ssl_issues,
        )


class FieldNameMapping(BaseModel):
    """Names of the vector, content, and metadata fields inside the index.

    The same mapping must be used for writes and reads against one index,
    otherwise documents are stored under fields searches never look at.
    """

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    vector_field: str = Field(
        default="vector",
        min_length=1,
        validation_alias=AliasChoices("vector_field", "vectorFieldName"),
    )
    text_field: str = Field(
        default="text",
        min_length=1,
        validation_alias=AliasChoices("text_field", "contentFieldName", "textFieldName"),
    )
    metadata_field: str = Field(
        default="metadata",
        min_length=1,
        validation_alias=AliasChoices("metadata_field", "metadataFieldName"),
    )

    @model_validator(mode="after")
    def _names_are_distinct(self) -> FieldNameMapping:
        names = [self.vector_field, self.text_field, self.metadata_field]
        if len(set(names)) != len(names):
            raise ValueError(f"Index field names must be distinct, got {names}")
        return self


# ---------------------------------------------------------------------------
# Operation modes, one tagged variant per mode
# ---------------------------------------------------------------------------


class OperationMode(str, Enum):
    RETRIEVE = "retrieve"
    RETRIEVE_AS_TOOL = "retrieve-as-tool"
    LOAD = "load"
    INSERT = "insert"
    UPDATE = "update"


EXECUTE_MODES: tuple[OperationMode, ...] = (
    OperationMode.LOAD,
    OperationMode.INSERT,
    OperationMode.UPDATE,
)
SUPPLY_DATA_MODES: tuple[OperationMode, ...] = (
    OperationMode.RETRIEVE,
    OperationMode.RETRIEVE_AS_TOOL,
)


class _OperationBase(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True, extra="ignore")


class LoadOperation(_OperationBase):
    """Get many ranked documents for a prompt."""

    mode: Literal["load"] = "load"
    prompt: str
    top_k: PositiveInt = Field(default=4, alias="topK")
    include_document_metadata: bool = Field(default=True, alias="includeDocumentMetadata")


class InsertOperation(_OperationBase):
    mode: Literal["insert"] = "insert"


class UpdateOperation(_OperationBase):
    """Overwrite the stored record with the given id."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    mode: Literal["update"] = "update"
    id: str = Field(min_length=1)


class RetrieveOperation(_OperationBase):
    mode: Literal["retrieve"] = "retrieve"


class RetrieveAsToolOperation(_OperationBase):
    """Expose similarity search as a tool for an AI agent."""

    mode: Literal["retrieve-as-tool"] = "retrieve-as-tool"
    top_k: PositiveInt = Field(default=4, alias="topK")
    include_document_metadata: bool = Field(default=True, alias="includeDocumentMetadata")
    tool_name: str = Field(default="opensearch_vector_store", min_length=1, alias="toolName")
    tool_description: str = Field(
        default="Search the OpenSearch vector store for documents relevant to the query.",
        alias="toolDescription",
    )


Operation = Annotated[
    Union[
        LoadOperation,
        InsertOperation,
        UpdateOperation,
        RetrieveOperation,
        RetrieveAsToolOperation,
    ],
    Field(discriminator="mode"),
]
