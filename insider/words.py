from typing import List


def parse_word_list(text: str) -> List[str]:
    """Split line-delimited text into words, dropping blank lines."""
    return [line.strip() for line in text.splitlines() if line.strip()]


def load_word_list(path: str, logger=None) -> List[str]:
    """Read the word list at ``path``.

    A missing or unreadable file yields an empty list so the game can still
    run with words entered by hand.
    """
    try:
        with open(path, encoding='utf-8') as handle:
            words = parse_word_list(handle.read())
    except OSError as exc:
        if logger is not None:
            logger.warning(f"[words] could not read {path}: {exc}")
        return []
    if logger is not None:
        if words:
            logger.info(f"[words] loaded {len(words)} words from {path}")
        else:
            logger.warning(f"[words] {path} contains no words")
    return words
