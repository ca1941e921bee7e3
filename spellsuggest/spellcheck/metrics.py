from __future__ import annotations

PHONETIC_CODE_LENGTH = 4

PHONETIC_CLASSES = {
    # labials
    "b": "1", "f": "1", "p": "1", "v": "1",
    # gutturals and sibilants
    "c": "2", "g": "2", "j": "2", "k": "2", "q": "2", "s": "2", "x": "2", "z": "2",
    # dentals
    "d": "3", "t": "3",
    # liquids
    "l": "4",
    # nasals
    "m": "5", "n": "5",
    "r": "6",
}


def levenshtein(source: str, target: str) -> int:
    if source == target:
        return 0
    if not source or not target:
        return max(len(source), len(target))

    previous = list(range(len(target) + 1))
    for i, source_char in enumerate(source, start=1):
        current = [i] + [0] * len(target)
        for j, target_char in enumerate(target, start=1):
            cost = 0 if source_char == target_char else 1
            current[j] = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
        previous = current
    return previous[-1]


def bounded_levenshtein(source: str, target: str, max_distance: int) -> int | None:
    """Levenshtein distance, or None once it provably exceeds ``max_distance``."""
    if source == target:
        return 0
    if abs(len(source) - len(target)) > max_distance:
        return None
    if not source or not target:
        distance = max(len(source), len(target))
        return distance if distance <= max_distance else None

    previous = list(range(len(target) + 1))
    for i, source_char in enumerate(source, start=1):
        current = [i] + [0] * len(target)
        row_min = i
        for j, target_char in enumerate(target, start=1):
            cost = 0 if source_char == target_char else 1
            value = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
            current[j] = value
            if value < row_min:
                row_min = value

        # Every later row is at least this row's minimum.
        if row_min > max_distance:
            return None
        previous = current

    distance = previous[-1]
    return distance if distance <= max_distance else None


def osa_distance(source: str, target: str, max_distance: int) -> int | None:
    """Optimal string alignment distance: Levenshtein plus adjacent swaps.

    Returns None once the distance provably exceeds ``max_distance``.
    """
    if source == target:
        return 0
    if abs(len(source) - len(target)) > max_distance:
        return None
    if not source or not target:
        distance = max(len(source), len(target))
        return distance if distance <= max_distance else None

    before_previous: list[int] = []
    previous = list(range(len(target) + 1))
    previous_min = 0
    for i in range(1, len(source) + 1):
        current = [i] + [0] * len(target)
        row_min = i
        for j in range(1, len(target) + 1):
            cost = 0 if source[i - 1] == target[j - 1] else 1
            value = min(
                previous[j] + 1,
                current[j - 1] + 1,
                previous[j - 1] + cost,
            )
            if i > 1 and j > 1 and source[i - 1] == target[j - 2] and source[i - 2] == target[j - 1]:
                value = min(value, before_previous[j - 2] + 1)
            current[j] = value
            if value < row_min:
                row_min = value

        # A swap reaches back two rows, so both minima must exceed the cutoff.
        if row_min > max_distance and previous_min > max_distance:
            return None
        before_previous, previous, previous_min = previous, current, row_min

    distance = previous[-1]
    return distance if distance <= max_distance else None


def edit_similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return 1.0 - levenshtein(a, b) / longest


def transposition_similarity(a: str, b: str) -> float:
    """0.95 when one adjacent swap turns ``a`` into ``b``, 0.85 for a distant swap."""
    if a == b or len(a) != len(b):
        return 0.0
    diffs = [idx for idx, (left, right) in enumerate(zip(a, b)) if left != right]
    if len(diffs) != 2:
        return 0.0
    first, second = diffs
    if a[first] != b[second] or a[second] != b[first]:
        return 0.0
    return 0.95 if second == first + 1 else 0.85


def phonetic_code(text: str) -> str:
    letters = [ch for ch in text.lower() if "a" <= ch <= "z"]
    if not letters:
        return "0" * PHONETIC_CODE_LENGTH

    code = letters[0]
    for ch in letters[1:]:
        mapped = PHONETIC_CLASSES.get(ch)
        if mapped is None or mapped == code[-1]:
            continue
        code += mapped
        if len(code) == PHONETIC_CODE_LENGTH:
            break
    return code.ljust(PHONETIC_CODE_LENGTH, "0")


def phonetic_match(a: str, b: str) -> bool:
    return phonetic_code(a) == phonetic_code(b)


def ngrams(text: str, n: int) -> set[str]:
    if n <= 0 or len(text) < n:
        return set()
    return {text[i : i + n] for i in range(len(text) - n + 1)}


def ngram_similarity(a: str, b: str, n: int = 2) -> float:
    grams_a = ngrams(a, n)
    grams_b = ngrams(b, n)
    union = grams_a | grams_b
    if not union:
        return 0.0
    return len(grams_a & grams_b) / len(union)


def lcs_length(a: str, b: str) -> int:
    if not a or not b:
        return 0

    previous = [0] * (len(b) + 1)
    for a_char in a:
        current = [0] * (len(b) + 1)
        for j, b_char in enumerate(b, start=1):
            if a_char == b_char:
                current[j] = previous[j - 1] + 1
            else:
                current[j] = max(previous[j], current[j - 1])
        previous = current
    return previous[-1]


def lcs_similarity(a: str, b: str) -> float:
    longest = max(len(a), len(b))
    if longest == 0:
        return 0.0
    return lcs_length(a, b) / longest
