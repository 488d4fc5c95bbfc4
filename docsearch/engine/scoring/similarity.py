"""String similarity on a 0-100 scale."""


def edit_distance(a: str, b: str) -> int:
    """Compute Levenshtein edit distance between two strings."""
    if len(a) > len(b):
        a, b = b, a
    distances: list[int] = list(range(len(a) + 1))
    for j, ch_b in enumerate(b):
        new_distances = [j + 1]
        for i, ch_a in enumerate(a):
            if ch_a == ch_b:
                new_distances.append(distances[i])
            else:
                new_distances.append(1 + min(distances[i], distances[i + 1], new_distances[-1]))
        distances = new_distances
    return distances[-1]


def similarity(a: str, b: str) -> float:
    """Case-insensitive similarity between two strings.

    Returns:
        100 for equal strings, 90 when one contains the other, otherwise the
        edit distance normalized by the longer length, scaled to 0-100.
    """
    s1 = a.lower()
    s2 = b.lower()
    if s1 == s2:
        return 100.0
    if not s1 or not s2:
        return 0.0
    if s1 in s2 or s2 in s1:
        return 90.0
    longest = max(len(s1), len(s2))
    return max(0.0, (longest - edit_distance(s1, s2)) / longest * 100.0)
