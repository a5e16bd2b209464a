"""
Directive detection - finds the leading "use golang" pragma in a module
"""

import re

from .errors import DirectiveNotFoundError, EmptyGuestCodeError

# Statement-position literal at the very start of the module, either quote
# style, optional semicolon. Anchored with \A so commented-out mentions and
# directives further down the file never match.
DIRECTIVE_PATTERN = re.compile(r"""\A\s*["']use golang["'];?[ \t]*""")


def detect_go_directive(code: str) -> bool:
    """Return True if the module starts with the "use golang" directive"""
    return DIRECTIVE_PATTERN.match(code) is not None


def extract_go_code(code: str) -> str:
    """
    Strip the directive and return the embedded Go code

    Raises:
        DirectiveNotFoundError: If the module has no directive
        EmptyGuestCodeError: If nothing but whitespace follows the directive
    """
    match = DIRECTIVE_PATTERN.match(code)
    if not match:
        raise DirectiveNotFoundError()

    go_code = code[match.end():].strip()
    if not go_code:
        raise EmptyGuestCodeError()
    return go_code
