"""
Command line tokenizer.
"""

from typing import List


def tokenize(line: str) -> List[str]:
    """
    Split a command line into tokens.

    Tokens are separated by whitespace. Double quotes group whitespace into
    one token and are dropped; inside quotes a backslash escapes the next
    character. An unterminated quote runs to the end of the line.

    Example:
        tokenize('set greeting "hello world"') -> ["set", "greeting", "hello world"]
    """
    tokens: List[str] = []
    current: List[str] = []
    in_quotes = False
    escaping = False

    for char in line:
        if escaping:
            current.append(char)
            escaping = False
            continue

        if char == "\\" and in_quotes:
            escaping = True
            continue

        if char == '"':
            in_quotes = not in_quotes
            continue

        if char.isspace() and not in_quotes:
            if current:
                tokens.append("".join(current))
                current = []
            continue

        current.append(char)

    if current:
        tokens.append("".join(current))

    return tokens
