import pytest

from context_gateway.core.application.dispatch.upstream_messages import NOT_FINALIZED_MESSAGE
from context_gateway.core.value_objects.library_summary import LibrarySummary
from context_gateway.core.value_objects.search_result import SearchResult
from context_gateway.infrastructure.entrypoints.mcp.result_formatter import (
    NO_LIBRARIES_MESSAGE,
    RESULT_SEPARATOR,
    format_search_result,
    format_search_results,
    source_reputation_label,
)


def library(**overrides) -> LibrarySummary:
    payload = {
        "id": "/vercel/next.js",
        "title": "Next.js",
        "description": "The React Framework",
        "totalSnippets": 3200,
        "trustScore": 9,
        "benchmarkScore": 88,
        "versions": ["v14.3.0", "v15.0.0"],
    }
    payload.update(overrides)
    return LibrarySummary.from_payload(payload)


@pytest.mark.parametrize(
    "score, label",
    [(10, "High"), (7, "High"), (6.9, "Medium"), (4, "Medium"), (3.9, "Low"), (0, "Low"),
     (-1, "Unknown"), (None, "Unknown")],
)
def test_source_reputation_thresholds(score, label):
    assert source_reputation_label(score) == label


def test_full_result_lists_every_field():
    assert format_search_result(library()) == "\n".join(
        [
            "- Title: Next.js",
            "- Context7-compatible library ID: /vercel/next.js",
            "- Description: The React Framework",
            "- Code Snippets: 3200",
            "- Source Reputation: High",
            "- Benchmark Score: 88",
            "- Versions: v14.3.0, v15.0.0",
        ]
    )


def test_optional_fields_are_omitted():
    text = format_search_result(
        library(totalSnippets=-1, trustScore=None, benchmarkScore=0, versions=[])
    )

    assert "Code Snippets" not in text
    assert "Benchmark Score" not in text
    assert "Versions" not in text
    assert "- Source Reputation: Unknown" in text


def test_fractional_benchmark_score_is_kept():
    assert "- Benchmark Score: 72.5" in format_search_result(library(benchmarkScore=72.5))


def test_results_are_separated():
    result = SearchResult(results=(library(), library(id="/facebook/react", title="React")))

    text = format_search_results(result)

    assert text.count(RESULT_SEPARATOR) == 1
    assert text.index("- Title: Next.js") < text.index("- Title: React")


def test_no_results_message():
    assert format_search_results(SearchResult()) == NO_LIBRARIES_MESSAGE


def test_not_finalized_message_names_the_same_id_as_search_output():
    id_label = "Context7-compatible library ID"

    assert f"- {id_label}: /vercel/next.js" in format_search_result(library())
    assert NOT_FINALIZED_MESSAGE.count(id_label) == 2
