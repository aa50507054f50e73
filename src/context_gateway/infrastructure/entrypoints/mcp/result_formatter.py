"""Plain-text rendering of search results for LLM consumption."""

from __future__ import annotations

from context_gateway.core.value_objects.library_summary import LibrarySummary
from context_gateway.core.value_objects.search_result import SearchResult

RESULT_SEPARATOR = "\n----------\n"
NO_LIBRARIES_MESSAGE = "No documentation libraries found matching your query."

SEARCH_RESULTS_LEGEND = """Available Libraries:

Each result includes:
- Library ID: Context7-compatible identifier (format: /org/project)
- Name: Library or package name
- Description: Short summary
- Code Snippets: Number of available code examples
- Source Reputation: Authority indicator (High, Medium, Low, or Unknown)
- Benchmark Score: Quality indicator (100 is the highest score)
- Versions: List of versions if available. Use one of those versions if the user provides a version in their query. The format of the version is /org/project/version.

For best results, select libraries based on name match, source reputation, snippet coverage, benchmark score, and relevance to your use case.

----------

"""


def source_reputation_label(trust_score: float | None) -> str:
    if trust_score is None or trust_score < 0:
        return "Unknown"
    if trust_score >= 7:
        return "High"
    if trust_score >= 4:
        return "Medium"
    return "Low"


def format_search_result(result: LibrarySummary) -> str:
    lines = [
        f"- Title: {result.title}",
        f"- Context7-compatible library ID: {result.id}",
        f"- Description: {result.description}",
    ]
    if result.total_snippets is not None and result.total_snippets != -1:
        lines.append(f"- Code Snippets: {result.total_snippets}")
    lines.append(f"- Source Reputation: {source_reputation_label(result.trust_score)}")
    if result.benchmark_score is not None and result.benchmark_score > 0:
        lines.append(f"- Benchmark Score: {_number(result.benchmark_score)}")
    if result.versions:
        lines.append(f"- Versions: {', '.join(result.versions)}")
    return "\n".join(lines)


def format_search_results(result: SearchResult) -> str:
    if not result.has_results:
        return NO_LIBRARIES_MESSAGE
    return RESULT_SEPARATOR.join(format_search_result(item) for item in result.results)


def _number(value: float) -> str:
    return str(int(value)) if float(value).is_integer() else str(value)
