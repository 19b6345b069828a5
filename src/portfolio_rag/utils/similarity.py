"""Vector similarity helpers."""

import numpy as np


def cosine_similarity(vec1: list[float], vec2: list[float]) -> float:
    """Cosine similarity clamped to [0, 1].

    Opposite or orthogonal vectors both score 0, so a similarity threshold
    such as 0.75 keeps its usual meaning. A zero vector scores 0.

    Raises:
        ValueError: If the vectors are empty or differ in dimension
    """
    if len(vec1) != len(vec2):
        raise ValueError(f"Vector dimension mismatch: {len(vec1)} != {len(vec2)}")
    if not vec1:
        raise ValueError("Vectors cannot be empty")

    v1 = np.asarray(vec1, dtype=np.float64)
    v2 = np.asarray(vec2, dtype=np.float64)
    norm = np.linalg.norm(v1) * np.linalg.norm(v2)
    if norm == 0:
        return 0.0

    return clamp_score(float(np.dot(v1, v2) / norm))


def clamp_score(value: float | None) -> float:
    """Map a raw cosine value onto [0, 1]; missing or NaN values become 0."""
    if value is None or value != value:
        return 0.0
    return max(0.0, min(1.0, float(value)))


def normalize(vector: list[float]) -> list[float]:
    """Scale a vector to unit length (zero vectors are returned unchanged)."""
    arr = np.asarray(vector, dtype=np.float64)
    norm = np.linalg.norm(arr)
    if norm == 0:
        return arr.tolist()
    return (arr / norm).tolist()
