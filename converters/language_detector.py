"""Heuristic programming language detection for unlabelled code blocks.

Each language has a list of weighted line patterns. Every line of the snippet
is matched against every pattern and the weights are summed per language; the
best total wins. Ties go to the language listed first in ``LANGUAGE_RULES`` so
the result only depends on the input text.
"""

import re
from typing import Dict, List, Pattern, Tuple

UNKNOWN = 'Unknown'

Rule = Tuple[Pattern, int]


def _rules(*pairs: Tuple[str, int], flags: int = 0) -> List[Rule]:
    return [(re.compile(pattern, flags), points) for pattern, points in pairs]


LANGUAGE_RULES: Dict[str, List[Rule]] = {
    'JavaScript': _rules(
        (r'\bconsole\.(log|error|warn|info|debug)\s*\(', 2),
        (r'\b(const|let|var)\s+[\w$]+\s*=', 2),
        (r'\bfunction\s*[\w$]*\s*\([^$)]*\)\s*\{', 2),
        (r'=>', 1),
        (r'===|!==', 2),
        (r'\bundefined\b', 2),
        (r'\b(document|window)\.\w+', 2),
        (r'\brequire\s*\(\s*[\'"]', 2),
        (r'^\s*(import|export)\s+.*\bfrom\s+[\'"]', 2),
        (r'^\s*export\s+(default|const|function|class)\b', 2),
    ),
    'C': _rules(
        (r'^\s*#include\s*[<"][\w/]+\.h[>"]', 3),
        (r'\bprintf\s*\(', 2),
        (r'\b(malloc|calloc|realloc|free|sizeof)\s*\(', 2),
        (r'\bint\s+main\s*\(', 1),
        (r'^\s*(unsigned\s+|static\s+|const\s+)*(char|int|long|void|float|double|struct\s+\w+)\s*\*+\s*\w+', 2),
        (r'^\s*#define\s+\w+', 2),
    ),
    'C++': _rules(
        (r'^\s*#include\s*<\w+>', 3),
        (r'\bstd::', 3),
        (r'\b(cout|cin|cerr|endl)\b', 2),
        (r'\busing\s+namespace\s+\w+', 3),
        (r'\btemplate\s*<', 2),
        (r'^\s*(public|private|protected)\s*:', 2),
        (r'\bint\s+main\s*\(', 1),
    ),
    'Python': _rules(
        (r'^\s*def\s+\w+\s*\(.*\)\s*(->\s*[\w\[\], .]+)?:\s*$', 3),
        (r'^\s*(from\s+[\w.]+\s+)?import\s+[\w.]+(\s+as\s+\w+)?(\s*,\s*[\w.]+)*\s*$', 2),
        (r'\bprint\s*\(', 1),
        (r'^\s*(if|elif|while|for|with|try|except|else|finally)\b[^{;]*:\s*$', 2),
        (r'^\s*elif\b', 3),
        (r'^\s*class\s+\w+(\(.*\))?\s*:\s*$', 3),
        (r'\bself\.\w+', 1),
        (r'\b(None|True|False)\b', 1),
        (r'\blambda\b[\w\s,]*:', 2),
        (r'^\s*@\w+(\.\w+)*(\(.*\))?\s*$', 1),
    ),
    'Java': _rules(
        (r'\bSystem\.(out|err)\.print(ln|f)?\s*\(', 3),
        (r'\b(public|private|protected)\s+(static\s+)?(final\s+)?(class|interface|void|int|String|boolean|long)\b', 2),
        (r'^\s*import\s+(static\s+)?[\w.]+(\.\*)?\s*;', 2),
        (r'^\s*package\s+[\w.]+\s*;', 2),
        (r'\bString\[\]\s+\w+', 2),
        (r'^\s*@Override\b', 2),
        (r'\bnew\s+[A-Z]\w*(<.*>)?\s*\(', 1),
    ),
    'HTML': _rules(
        (r'<!DOCTYPE\s+html', 3),
        (r'</?(html|head|body|div|span|p|a|ul|ol|li|table|tr|td|script|style|h[1-6]|section|nav|form|input)\b[^>]*>', 2),
        flags=re.IGNORECASE,
    ),
    'CSS': _rules(
        (r'^\s*[.#]?[\w-]+(\s*[,>+~]?\s*[.#:]?[\w-]+)*\s*\{\s*$', 1),
        (r'^\s*[\w-]+\s*:\s*[^;{}()]+;\s*$', 2),
        (r'^\s*@(media|import|font-face|keyframes)\b', 2),
        (r'\b\d+(px|em|rem|vh|vw)\b', 1),
        (r'#[0-9a-fA-F]{3,6}\s*;', 1),
    ),
    'Ruby': _rules(
        (r'^\s*def\s+[\w.]+[?!]?(\s*\(.*\))?\s*$', 2),
        (r'^\s*end\s*$', 2),
        (r'\bputs\s+', 2),
        (r'^\s*require(_relative)?\s+[\'"]', 2),
        (r'\.each(_with_index)?\s+do\b|\bdo\s*\|[\w, ]+\|', 2),
        (r'\battr_(accessor|reader|writer)\b', 3),
        (r'^\s*module\s+[A-Z]\w*\s*$', 2),
        (r'^\s*elsif\b', 3),
    ),
    'Go': _rules(
        (r'^\s*package\s+\w+\s*$', 3),
        (r'^\s*func\s+(\(\s*\w+\s+\*?\w+\s*\)\s*)?\w+\s*\(', 3),
        (r'\bfmt\.\w+\s*\(', 3),
        (r':=', 2),
        (r'^\s*import\s+(\(\s*)?"', 2),
        (r'\bgo\s+func\b|\bdefer\s+\w+|\bchan\s+\w+', 2),
    ),
    'PHP': _rules(
        (r'<\?php', 3),
        (r'\$\w+\s*(=|->|\[)', 2),
        (r'\$this->', 3),
        (r'\becho\s+', 1),
        (r'\bfunction\s+\w+\s*\(\s*\$', 2),
        (r'\b(public|private|protected)\s+function\b', 2),
    ),
}


def score_languages(code: str) -> Dict[str, int]:
    """Return the accumulated pattern score per language label."""
    scores = {language: 0 for language in LANGUAGE_RULES}
    for line in code.splitlines():
        if not line.strip():
            continue
        for language, rules in LANGUAGE_RULES.items():
            for pattern, points in rules:
                if pattern.search(line):
                    scores[language] += points
    return scores


def detect_language(code: str) -> str:
    """
    Guess the language label of a code snippet.

    Args:
        code: Normalized code text

    Returns:
        One of the keys of ``LANGUAGE_RULES``, or ``'Unknown'``
    """
    if not code or not code.strip():
        return UNKNOWN

    best_language = UNKNOWN
    best_score = 0
    for language, score in score_languages(code).items():
        if score > best_score:
            best_language = language
            best_score = score

    return best_language


__all__ = ['LANGUAGE_RULES', 'UNKNOWN', 'detect_language', 'score_languages']
