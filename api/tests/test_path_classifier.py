from __future__ import annotations

import pytest

from repolens.services.path_classifier import ROOT_FOLDER, area_of, areas_from_message, folder_of


def test_folder_of_strips_final_segment() -> None:
    assert folder_of("a/b/c.txt") == "/a/b"
    assert folder_of("src/index.js") == "/src"


def test_folder_of_bare_filename_is_root() -> None:
    assert folder_of("c.txt") == "/root"
    assert folder_of("README.md") == ROOT_FOLDER


@pytest.mark.parametrize(
    "folder,area",
    [
        ("/src/tests/unit", "testing"),
        ("/spec/models", "testing"),
        ("/docs/api", "documentation"),
        ("/src/api/v1", "api"),
        ("/web/frontend", "frontend"),
        ("/server", "backend"),
        ("/.github/workflows", "configuration"),
        ("/public", "assets"),
        ("/css", "styling"),
        ("/src/components", "components"),
        ("/app/services", "services"),
        ("/lib/utils", "utilities"),
        ("/db/schema", "data-models"),
        ("/root", None),
        ("/lib", None),
    ],
)
def test_area_of_ordered_rules(folder: str, area) -> None:
    assert area_of(folder) == area


def test_area_of_first_match_wins_and_is_case_insensitive() -> None:
    # Matches testing, api and services; testing is listed first.
    assert area_of("/src/API/Tests/services") == "testing"
    assert area_of("/Docs/Components") == "documentation"


def test_area_of_is_stable_across_calls() -> None:
    assert [area_of("/src/tests/unit") for _ in range(3)] == ["testing"] * 3


def test_areas_from_message_fires_every_matching_rule_in_rule_order() -> None:
    assert areas_from_message("Fix login bug in API client") == [
        "frontend",
        "backend",
        "authentication",
        "bug-fixes",
    ]


def test_areas_from_message_uses_word_boundaries() -> None:
    assert areas_from_message("Rebuilding guide") == []
    assert areas_from_message("") == []
    assert areas_from_message("Update README docs") == ["documentation"]


def test_message_and_path_classifiers_can_disagree() -> None:
    assert area_of("/src/api/handlers") == "api"
    assert areas_from_message("api handlers") == ["backend"]
