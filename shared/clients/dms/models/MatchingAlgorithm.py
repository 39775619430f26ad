"""Matching algorithms used by correspondents, document types and tags."""

from enum import IntEnum
from typing import Any

from shared.clients.dms.models.NamedItem import NamedItem


class MatchingAlgorithm(IntEnum):
    NONE = 0
    ANY_WORD = 1
    ALL_WORDS = 2
    EXACT_MATCH = 3
    REGULAR_EXPRESSION = 4
    FUZZY_WORD = 5
    AUTOMATIC = 6


MATCHING_ALGORITHM_LABELS: dict[int, str] = {
    MatchingAlgorithm.NONE: "None",
    MatchingAlgorithm.ANY_WORD: "Any word",
    MatchingAlgorithm.ALL_WORDS: "All words",
    MatchingAlgorithm.EXACT_MATCH: "Exact match",
    MatchingAlgorithm.REGULAR_EXPRESSION: "Regular expression",
    MatchingAlgorithm.FUZZY_WORD: "Fuzzy word",
    MatchingAlgorithm.AUTOMATIC: "Automatic",
}

MATCHING_ALGORITHM_DESCRIPTION = "Matching algorithm: " + ", ".join(
    f"{algorithm_id}={label}" for algorithm_id, label in MATCHING_ALGORITHM_LABELS.items()
)


def enhance_matching_algorithm(item: dict[str, Any]) -> dict[str, Any]:
    """
    Replace the numeric ``matching_algorithm`` of a correspondent, document type or tag
    with a NamedItem. Records without the key are returned unchanged.

    Args:
        item (dict[str, Any]): The raw object as returned by the DMS.

    Returns:
        dict[str, Any]: A copy of the object with the algorithm rendered as {id, name}.
    """
    algorithm = item.get("matching_algorithm")
    if not isinstance(algorithm, int) or isinstance(algorithm, bool):
        return item
    name = MATCHING_ALGORITHM_LABELS.get(algorithm) or str(algorithm)
    return {**item, "matching_algorithm": NamedItem(id=algorithm, name=name).model_dump()}


def enhance_matching_algorithm_list(items: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return [enhance_matching_algorithm(item) for item in items]
