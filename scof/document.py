"""JSON load/save for movements and scores."""

from __future__ import annotations

import json
from typing import Any

from scof.models import Movement
from scof.score import Score


def _read_json(path: str) -> dict[str, Any]:
    with open(path, "r", encoding="utf-8") as fh:
        data = json.load(fh)
    if not isinstance(data, dict):
        raise ValueError(f"'{path}' does not hold a JSON object.")
    return data


def _write_json(data: dict[str, Any], path: str) -> None:
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(data, fh, indent=2, ensure_ascii=False)
        fh.write("\n")


def load_movement(path: str) -> Movement:
    """
    Read a movement from a JSON file.

    Raises:
        OSError: If the file cannot be read.
        ValueError: If the file is not a JSON object.
    """
    return Movement.from_dict(_read_json(path))


def save_movement(movement: Movement, path: str) -> None:
    _write_json(movement.to_dict(), path)


def load_score(path: str) -> Score:
    return Score.from_dict(_read_json(path))


def save_score(score: Score, path: str) -> None:
    _write_json(score.to_dict(), path)


def score_for_movement(movement: Movement, title: str = "") -> Score:
    """Wrap a single movement in an otherwise default score."""
    score = Score(movement=[movement])
    if title:
        score.title = title
    return score
