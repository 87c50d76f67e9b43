"""Canonical Pydantic models shared across all swagfluence modules.

This is the single source of truth for data shapes in the project. The models
fall into three groups:

**Spec document models** -- the deserialised Swagger 2.0 / OpenAPI 3.x
document: :class:`Schema`, :class:`Components`, :class:`Info`, :class:`Tag`,
:class:`Parameter`, :class:`MediaType`, :class:`RequestBody`,
:class:`Response`, :class:`Operation`, :class:`Spec`, plus the flattened
:class:`Endpoint`.

**Confluence payload models** -- request and response bodies of the
Confluence REST content API: :class:`Space`, :class:`Storage`,
:class:`Body`, :class:`Version`, :class:`PageAncestor`, :class:`Page`,
:class:`SearchResponse`.

**Runtime models** -- :class:`ConfluenceConfig` and
:class:`ConversionSummary`.

Spec document models are frozen: a loaded :class:`Spec` is never mutated, so
one instance can be shared by every resolver and synthesizer in a run.
Unknown keys are ignored.
"""

from __future__ import annotations

import enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

_SPEC_MODEL_CONFIG = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


# --- Spec Document Models ---


class HTTPMethod(str, enum.Enum):
    """HTTP methods that produce a documentation page.

    ``trace`` is deliberately absent: it never carries a payload worth
    documenting.
    """

    GET = "get"
    POST = "post"
    PUT = "put"
    PATCH = "patch"
    DELETE = "delete"
    HEAD = "head"
    OPTIONS = "options"


class Schema(BaseModel):
    """A type description: a schema, a property, or a named definition.

    One model covers every kind the spec can express. The kind is carried by
    ``type`` (``object``, ``array``, ``string``, ``integer``, ``number``,
    ``boolean`` or unset) unless ``ref`` is set, in which case the node is a
    lazy edge into the definition table. References are never followed when
    the document is loaded; see :class:`~swagfluence.parser.resolver.Resolver`.

    ``properties`` keeps the declaration order of the source document.

    Whether an example was supplied is tracked separately from its value
    (see :attr:`has_example`), so ``example: null`` counts as explicit.
    """

    model_config = _SPEC_MODEL_CONFIG

    type: Optional[str] = None
    format: Optional[str] = None
    ref: Optional[str] = Field(default=None, alias="$ref")
    title: Optional[str] = None
    description: Optional[str] = None
    properties: dict[str, Schema] = Field(default_factory=dict)
    required: list[str] = Field(default_factory=list)
    items: Optional[Schema] = None
    example: Any = None
    min_length: Optional[int] = Field(default=None, alias="minLength")
    max_length: Optional[int] = Field(default=None, alias="maxLength")
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    pattern: Optional[str] = None
    read_only: bool = Field(default=False, alias="readOnly")

    @field_validator("type", mode="before")
    @classmethod
    def _collapse_type_list(cls, value: Any) -> Any:
        # OpenAPI 3.1 allows ``type: [string, "null"]``.
        if isinstance(value, list):
            non_null = [v for v in value if v != "null"]
            return non_null[0] if non_null else None
        return value

    @field_validator("required", mode="before")
    @classmethod
    def _ignore_boolean_required(cls, value: Any) -> Any:
        # Some Swagger 2.0 documents put ``required: true`` on a property.
        if isinstance(value, bool):
            return []
        return value

    @field_validator("items", mode="before")
    @classmethod
    def _drop_tuple_items(cls, value: Any) -> Any:
        if isinstance(value, list):
            return value[0] if value else None
        return value

    @property
    def is_reference(self) -> bool:
        """``True`` when this node is a ``$ref`` edge."""
        return bool(self.ref)

    @property
    def has_example(self) -> bool:
        """``True`` when the source document supplied an ``example`` key."""
        return "example" in self.model_fields_set

    def is_required(self, field_name: str) -> bool:
        """Return whether *field_name* is listed in ``required``."""
        return field_name in self.required


class Components(BaseModel):
    """The OpenAPI 3.x ``components`` container (only ``schemas`` is used)."""

    model_config = _SPEC_MODEL_CONFIG

    schemas: dict[str, Schema] = Field(default_factory=dict)


class Info(BaseModel):
    """API metadata from the spec's *Info Object*."""

    model_config = _SPEC_MODEL_CONFIG

    title: str = "Untitled API"
    description: Optional[str] = None
    version: str = "0.0.0"


class Tag(BaseModel):
    """A top-level tag declaration."""

    model_config = _SPEC_MODEL_CONFIG

    name: str
    description: Optional[str] = None


class Parameter(BaseModel):
    """A single operation parameter.

    Swagger 2.0 declares ``type``/``format`` inline for non-body parameters
    and a ``schema`` for ``in: body``; OpenAPI 3.x always uses ``schema``.
    """

    model_config = _SPEC_MODEL_CONFIG

    name: str = ""
    location: str = Field(default="", alias="in")
    description: Optional[str] = None
    required: bool = False
    type: Optional[str] = None
    format: Optional[str] = None
    schema_: Optional[Schema] = Field(default=None, alias="schema")

    @property
    def is_body(self) -> bool:
        """``True`` for a Swagger 2.0 body parameter."""
        return self.location == "body"


class MediaType(BaseModel):
    """A media-type entry of a request body or response ``content`` map."""

    model_config = _SPEC_MODEL_CONFIG

    schema_: Optional[Schema] = Field(default=None, alias="schema")


class RequestBody(BaseModel):
    """An OpenAPI 3.x *Request Body Object*."""

    model_config = _SPEC_MODEL_CONFIG

    description: Optional[str] = None
    required: bool = False
    content: dict[str, MediaType] = Field(default_factory=dict)


class Response(BaseModel):
    """A single response; ``schema`` is the Swagger 2.0 form, ``content`` the 3.x form."""

    model_config = _SPEC_MODEL_CONFIG

    description: Optional[str] = None
    content: dict[str, MediaType] = Field(default_factory=dict)
    schema_: Optional[Schema] = Field(default=None, alias="schema")

    def primary_schema(self) -> Optional[Schema]:
        """Return the Swagger 2.0 schema or the first media type's schema."""
        if self.schema_ is not None:
            return self.schema_
        for media in self.content.values():
            if media.schema_ is not None:
                return media.schema_
        return None


class Operation(BaseModel):
    """A single operation (one path + HTTP method pair)."""

    model_config = _SPEC_MODEL_CONFIG

    summary: Optional[str] = None
    description: Optional[str] = None
    operation_id: Optional[str] = Field(default=None, alias="operationId")
    tags: list[str] = Field(default_factory=list)
    parameters: list[Parameter] = Field(default_factory=list)
    request_body: Optional[RequestBody] = Field(default=None, alias="requestBody")
    consumes: list[str] = Field(default_factory=list)
    produces: list[str] = Field(default_factory=list)
    responses: dict[str, Response] = Field(default_factory=dict)

    @field_validator("responses", mode="before")
    @classmethod
    def _stringify_status_codes(cls, value: Any) -> Any:
        # YAML parses unquoted ``200:`` keys as integers.
        if isinstance(value, dict):
            return {str(code): response for code, response in value.items()}
        return value

    def body_parameter(self) -> Optional[Parameter]:
        """Return the first Swagger 2.0 ``in: body`` parameter, if any."""
        for param in self.parameters:
            if param.is_body:
                return param
        return None


class Spec(BaseModel):
    """The root Swagger/OpenAPI document.

    Exactly one of the two definition tables is normally populated:
    ``definitions`` (Swagger 2.0) or ``components.schemas`` (OpenAPI 3.x).
    Path-level keys that are not operation objects (``parameters``,
    ``summary``, ``servers``) are dropped on load.
    """

    model_config = _SPEC_MODEL_CONFIG

    openapi: Optional[str] = None
    swagger: Optional[str] = None
    info: Info = Field(default_factory=Info)
    paths: dict[str, dict[str, Operation]] = Field(default_factory=dict)
    definitions: dict[str, Schema] = Field(default_factory=dict)
    components: Optional[Components] = None
    tags: list[Tag] = Field(default_factory=list)

    @field_validator("openapi", "swagger", mode="before")
    @classmethod
    def _stringify_version(cls, value: Any) -> Any:
        # ``swagger: 2.0`` unquoted in YAML is a float.
        if value is not None and not isinstance(value, str):
            return str(value)
        return value

    @field_validator("paths", mode="before")
    @classmethod
    def _keep_operation_objects(cls, value: Any) -> Any:
        if not isinstance(value, dict):
            return value
        return {
            path: {
                key: op for key, op in (item or {}).items() if isinstance(op, dict)
            }
            for path, item in value.items()
        }

    @property
    def version(self) -> str:
        """The declared ``openapi`` or ``swagger`` version string."""
        return self.openapi or self.swagger or ""


class Endpoint(BaseModel):
    """One documentable endpoint: a path, an HTTP method, and its page title."""

    model_config = ConfigDict(frozen=True)

    path: str
    method: HTTPMethod
    operation: Operation
    title: str


# --- Confluence Payload Models ---


class Space(BaseModel):
    """The space a page lives in."""

    key: str


class Storage(BaseModel):
    """Page body in Confluence storage format."""

    value: str
    representation: str = "storage"


class Body(BaseModel):
    """Wrapper for :class:`Storage`."""

    storage: Storage


class Version(BaseModel):
    """Page version counter used for optimistic concurrency."""

    number: int


class PageAncestor(BaseModel):
    """A parent page reference."""

    id: str


class Page(BaseModel):
    """A Confluence content object.

    Used both as the request payload for create/update and as the parsed
    result of search responses, hence the optional ``space`` and ``body``.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = None
    type: str = "page"
    title: str
    space: Optional[Space] = None
    body: Optional[Body] = None
    version: Optional[Version] = None
    ancestors: list[PageAncestor] = Field(default_factory=list)


class SearchResponse(BaseModel):
    """Result envelope of ``GET /rest/api/content``."""

    model_config = ConfigDict(extra="ignore")

    results: list[Page] = Field(default_factory=list)


# --- Runtime Models ---


class ConfluenceConfig(BaseModel):
    """Connection settings for the Confluence REST API.

    Publishing is enabled only when the base URL, username, API token, and
    space key are all present; otherwise pages are printed to stdout.

    Example::

        ConfluenceConfig(
            base_url="https://example.atlassian.net/wiki",
            username="me@example.com",
            api_token="...",
            space_key="API",
        )
    """

    base_url: str = ""
    username: str = ""
    api_token: str = Field(default="", repr=False)
    space_key: str = ""
    parent_page_id: str = ""
    timeout: float = Field(default=30.0, gt=0, description="Request timeout in seconds")

    @field_validator("base_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @property
    def enabled(self) -> bool:
        """Whether every setting required for publishing is present."""
        return bool(self.base_url and self.username and self.api_token and self.space_key)

    def page_url(self, page_id: str) -> str:
        """Return the browser URL of a page."""
        return f"{self.base_url}/pages/viewpage.action?pageId={page_id}"


class ConversionSummary(BaseModel):
    """Outcome of one :meth:`~swagfluence.converter.Converter.convert` run."""

    api_title: str
    total: int
    processed: int = 0
    parent_page_id: str = ""
    page_ids: list[str] = Field(default_factory=list)
