"""swagfluence -- Publish Swagger/OpenAPI specs as Confluence documentation.

This package turns a Swagger 2.0 or OpenAPI 3.x document into one
Confluence page per endpoint. Each page lists the endpoint's parameters,
request body fields, responses, and a synthesised example payload. When no
Confluence credentials are configured the pages are printed instead.

Typical workflow::

    export CONFLUENCE_BASE_URL=https://example.atlassian.net/wiki
    export CONFLUENCE_USERNAME=me@example.com
    export CONFLUENCE_API_TOKEN=...
    export CONFLUENCE_SPACE_KEY=API
    swagfluence convert https://petstore.swagger.io/v2/swagger.json

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models for the spec document and Confluence payloads.
    config: Confluence configuration from flags, environment, and project file.
    converter: Orchestrates load, extract, format, and publish.
    exceptions: Exception hierarchy with exit-code mapping.
    exit_codes: Numeric exit codes following clig.dev conventions.
    output: stdout/stderr formatting system with Rich support.
"""

__version__ = "0.1.0"
