"""Documentation-retrieval gateway for AI agents (MCP over stdio and streamable HTTP)."""
