"""apicomplete -- OpenAPI-aware command-line completion for HTTPie.

This package keeps a local registry of named APIs, each pointing at an
OpenAPI 3.x JSON document, and turns a partially typed ``http ...`` command
line into completion candidates: registered base URLs, paths under a matched
base URL, or parameters of a matched path.

Typical workflow::

    apicomplete spec add petstore https://petstore3.swagger.io/api/v3/openapi.json \\
        --base-url https://petstore3.swagger.io/api/v3
    apicomplete completions --shell fish --output ~/.config/fish/completions/http.fish
    apicomplete complete "http https://petstore3.swagger.io/api/v3/pet/"

Modules:
    app: Typer application and CLI entry point.
    models: Pydantic models shared across the package.
    config: XDG storage paths, atomic writes, and global config.
    store: The registry of API entries and their cached specs.
    fetcher: Fetch/refresh lifecycle for cached specs.
    index: Queryable path index built from a cached spec.
    completion: Tokenizer and completion engine.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich support.
"""

__version__ = "0.1.0"
