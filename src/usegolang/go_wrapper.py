"""
Go source normalization
"""

import re
from typing import List

PACKAGE_MAIN_PATTERN = re.compile(r"^\s*package\s+main\b", re.MULTILINE)
SINGLE_IMPORT_PATTERN = re.compile(r'import\s+(?:[\w.]+\s+)?"([^"]+)"')
BLOCK_IMPORT_PATTERN = re.compile(r"import\s+\(([\s\S]*?)\)")
BLOCK_LINE_PATTERN = re.compile(r'"([^"]+)"')


def parse_imports(code: str) -> List[str]:
    """Return unique import paths of a Go source, in first-seen order"""
    imports: List[str] = []

    for match in SINGLE_IMPORT_PATTERN.finditer(code):
        imports.append(match.group(1))

    for match in BLOCK_IMPORT_PATTERN.finditer(code):
        for line in match.group(1).splitlines():
            line_match = BLOCK_LINE_PATTERN.search(line)
            if line_match:
                imports.append(line_match.group(1))

    return list(dict.fromkeys(imports))


def wrap_go_code(code: str) -> str:
    """Make the code a complete main package, never adding a second clause"""
    if PACKAGE_MAIN_PATTERN.search(code):
        return code

    return f"package main\n\n{code}"
