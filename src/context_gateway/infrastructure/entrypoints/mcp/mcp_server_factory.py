"""FastMCP server exposing the two documentation tools.

Annotations are evaluated by FastMCP to build the tool input schemas, so this
module keeps them as runtime objects (no postponed evaluation).
"""

from typing import Annotated

from mcp.server.fastmcp import Context, FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from context_gateway.core.value_objects.client_identity import ClientIdentity
from context_gateway.infrastructure.entrypoints.mcp.docs_tool_handlers import DocsToolHandlers

SERVER_NAME = "context-gateway"

SERVER_INSTRUCTIONS = (
    "Use this server to retrieve up-to-date documentation and code examples for any library."
)

RESOLVE_LIBRARY_ID_DESCRIPTION = """Resolves a package/product name to a Context7-compatible library ID and returns matching libraries.

You MUST call this function before 'query-docs' to obtain a valid Context7-compatible library ID UNLESS the user explicitly provides a library ID in the format '/org/project' or '/org/project/version' in their query.

Selection Process:
1. Analyze the query to understand what library/package the user is looking for
2. Return the most relevant match based on:
- Name similarity to the query (exact matches prioritized)
- Description relevance to the query's intent
- Documentation coverage (prioritize libraries with higher Code Snippet counts)
- Source reputation (consider libraries with High or Medium reputation more authoritative)
- Benchmark Score: Quality indicator (100 is the highest score)

Response Format:
- Return the selected library ID in a clearly marked section
- Provide a brief explanation for why this library was chosen
- If multiple good matches exist, acknowledge this but proceed with the most relevant one
- If no good matches exist, clearly state this and suggest query refinements

For ambiguous queries, request clarification before proceeding with a best-guess match.

IMPORTANT: Do not call this tool more than 3 times per question. If you cannot find what you need after 3 calls, use the best result you have."""

QUERY_DOCS_DESCRIPTION = """Retrieves and queries up-to-date documentation and code examples from Context7 for any programming library or framework.

You must call 'resolve-library-id' first to obtain the exact Context7-compatible library ID required to use this tool, UNLESS the user explicitly provides a library ID in the format '/org/project' or '/org/project/version' in their query.

IMPORTANT: Do not call this tool more than 3 times per question. If you cannot find what you need after 3 calls, use the best information you have."""

_NO_SECRETS = (
    "IMPORTANT: Do not include any sensitive or confidential information such as API keys, "
    "passwords, credentials, or personal data in your query."
)

QueryForRanking = Annotated[
    str,
    Field(
        description=(
            "The user's original question or task. This is used to rank library results by "
            "relevance to what the user is trying to accomplish. " + _NO_SECRETS
        )
    ),
]
LibraryName = Annotated[
    str,
    Field(description="Library name to search for and retrieve a Context7-compatible library ID."),
]
LibraryId = Annotated[
    str,
    Field(
        description=(
            "Exact Context7-compatible library ID (e.g., '/mongodb/docs', '/vercel/next.js', "
            "'/supabase/supabase', '/vercel/next.js/v14.3.0-canary.87') retrieved from "
            "'resolve-library-id' or directly from user query in the format '/org/project' "
            "or '/org/project/version'."
        )
    ),
]
DocsQuestion = Annotated[
    str,
    Field(
        description=(
            "The question or task you need help with. Be specific and include relevant "
            "details. Good: 'How to set up authentication with JWT in Express.js' or 'React "
            "useEffect cleanup function examples'. Bad: 'auth' or 'hooks'. " + _NO_SECRETS
        )
    ),
]


def handshake_identity(ctx: Context) -> ClientIdentity | None:
    """Client name/version announced in the protocol initialize handshake, if any."""
    params = ctx.session.client_params
    if params is None:
        return None
    info = params.clientInfo
    return ClientIdentity(name=info.name, version=info.version)


def build_mcp_server(handlers: DocsToolHandlers) -> FastMCP:
    server = FastMCP(
        name=SERVER_NAME,
        instructions=SERVER_INSTRUCTIONS,
        # uvicorn binds the socket; a non-loopback host keeps FastMCP from pinning Host headers
        host="0.0.0.0",
        stateless_http=True,
        json_response=True,
    )

    @server.tool(
        name="resolve-library-id",
        title="Resolve Context7 Library ID",
        description=RESOLVE_LIBRARY_ID_DESCRIPTION,
        annotations=ToolAnnotations(readOnlyHint=True),
    )
    async def resolve_library_id(
        query: QueryForRanking,
        libraryName: LibraryName,  # noqa: N803
        ctx: Context,
    ) -> str:
        return await handlers.resolve_library_id(query, libraryName, handshake_identity(ctx))

    @server.tool(
        name="query-docs",
        title="Query Documentation",
        description=QUERY_DOCS_DESCRIPTION,
        annotations=ToolAnnotations(readOnlyHint=True),
    )
    async def query_docs(
        libraryId: LibraryId,  # noqa: N803
        query: DocsQuestion,
        ctx: Context,
    ) -> str:
        return await handlers.query_docs(libraryId, query, handshake_identity(ctx))

    return server
