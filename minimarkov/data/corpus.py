"""Reading words out of text files."""

from pathlib import Path
from typing import Iterator, List, Union


STRIP_CHARS = '.,()[]{}'
_STRIP_TABLE = str.maketrans('', '', STRIP_CHARS)


def sanitize(word: str) -> str:
    """Lowercase a word and drop the characters in STRIP_CHARS."""
    return word.lower().translate(_STRIP_TABLE)


def iter_tokens(path: Union[str, Path]) -> Iterator[str]:
    """
    Yield sanitized whitespace-separated words from a UTF-8 file.

    Words left empty by sanitizing (a lone "..." for instance) are skipped.
    """
    with open(path, 'r', encoding='utf-8') as f:
        for line in f:
            for word in line.split():
                token = sanitize(word)
                if token:
                    yield token


def read_tokens(path: Union[str, Path]) -> List[str]:
    """Read all sanitized words of a file."""
    return list(iter_tokens(path))
