"""
Exported Go signatures and their TypeScript declarations

Functions marked with ``//export <name>`` are parsed with a small
recursive-descent parser that accepts the subset the bindings can express:

    decl   := "func" IDENT "(" [params] ")" [result] ["{" ...]
    params := param { "," param } [","]
    param  := IDENT [IDENT]
    result := IDENT | "(" IDENT ")"

Anything else (methods, generics, slices, pointers, qualified or variadic
types, multiple results) is skipped rather than reported.
"""

import re
from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple

EXPORT_MARKER = re.compile(r"^\s*//export\s+([A-Za-z_]\w*)\s*$")
TOKEN_PATTERN = re.compile(r"\s*(?:([A-Za-z_]\w*)|(\.\.\.|\S))")

NUMBER_TYPES = frozenset({
    "int", "int8", "int16", "int32", "int64",
    "uint", "uint8", "uint16", "uint32", "uint64", "uintptr",
    "float32", "float64", "byte", "rune",
})
TS_TYPES = frozenset({"number", "string", "boolean", "void", "any", "unknown"})


@dataclass
class Parameter:
    name: str
    type: str


@dataclass
class ExportedFunction:
    """Signature of one //export-marked Go function"""
    name: str
    params: List[Parameter] = field(default_factory=list)
    return_type: Optional[str] = None


class SignatureSyntaxError(ValueError):
    """Declaration outside the supported subset"""


def go_type_to_ts(go_type: Optional[str]) -> str:
    """Map a Go type name to its TypeScript counterpart"""
    if not go_type:
        return "void"
    if go_type in TS_TYPES:
        return go_type
    if go_type in NUMBER_TYPES:
        return "number"
    if go_type == "string":
        return "string"
    if go_type == "bool":
        return "boolean"
    return "any"


def _tokenize(text: str) -> Iterator[Tuple[str, str]]:
    for match in TOKEN_PATTERN.finditer(text):
        ident, punct = match.groups()
        if ident is not None:
            yield ("ident", ident)
        elif punct is not None:
            yield ("punct", punct)


class _SignatureParser:
    def __init__(self, text: str):
        self.tokens = list(_tokenize(text))
        self.pos = 0

    def peek(self) -> Tuple[str, str]:
        if self.pos < len(self.tokens):
            return self.tokens[self.pos]
        return ("eof", "")

    def advance(self) -> Tuple[str, str]:
        token = self.peek()
        self.pos += 1
        return token

    def expect(self, kind: str, value: Optional[str] = None) -> str:
        token_kind, token_value = self.advance()
        if token_kind != kind or (value is not None and token_value != value):
            raise SignatureSyntaxError(f"expected {value or kind}, got {token_value or 'end of input'}")
        return token_value

    def parse(self) -> Tuple[str, List[Parameter], Optional[str]]:
        self.expect("ident", "func")
        name = self.expect("ident")
        self.expect("punct", "(")
        params = self.parse_params()
        self.expect("punct", ")")
        return_type = self.parse_result()

        kind, value = self.peek()
        if kind != "eof" and value != "{":
            raise SignatureSyntaxError(f"unexpected {value} after signature")
        return name, params, return_type

    def parse_params(self) -> List[Parameter]:
        groups: List[List[str]] = []
        while self.peek() != ("punct", ")"):
            group = [self.expect("ident")]
            if self.peek()[0] == "ident":
                group.append(self.advance()[1])
            groups.append(group)
            if self.peek() == ("punct", ","):
                self.advance()
            elif self.peek() != ("punct", ")"):
                raise SignatureSyntaxError(f"unexpected {self.peek()[1] or 'end of input'} in parameters")

        if all(len(group) == 1 for group in groups):
            # Unnamed parameters: every entry is a type
            return [Parameter(f"arg{i}", group[0]) for i, group in enumerate(groups)]

        params: List[Parameter] = []
        pending: List[str] = []
        for group in groups:
            if len(group) == 1:
                pending.append(group[0])
                continue
            name, go_type = group
            params.extend(Parameter(p, go_type) for p in pending)
            params.append(Parameter(name, go_type))
            pending = []
        if pending:
            raise SignatureSyntaxError(f"missing type for {', '.join(pending)}")
        return params

    def parse_result(self) -> Optional[str]:
        kind, value = self.peek()
        if kind == "ident":
            self.advance()
            return value
        if value == "(":
            self.advance()
            return_type = self.expect("ident")
            self.expect("punct", ")")
            return return_type
        return None


def parse_signature(declaration: str) -> ExportedFunction:
    """
    Parse a single ``func`` declaration

    Raises:
        SignatureSyntaxError: If the declaration is outside the supported subset
    """
    name, params, return_type = _SignatureParser(declaration).parse()
    return ExportedFunction(name=name, params=params, return_type=return_type)


def _declaration_text(lines: Sequence[str], start: int) -> str:
    """Signature text starting at lines[start], up to the opening brace"""
    collected = []
    for line in lines[start:]:
        brace = line.find("{")
        if brace >= 0:
            collected.append(line[:brace + 1])
            break
        collected.append(line)
    return " ".join(collected)


def parse_go_functions(source: str) -> List[ExportedFunction]:
    """Return the //export-marked functions of a Go source, in source order"""
    functions: List[ExportedFunction] = []
    lines = source.splitlines()

    for i, line in enumerate(lines[:-1]):
        marker = EXPORT_MARKER.match(line)
        if not marker or not lines[i + 1].lstrip().startswith("func"):
            continue
        try:
            parsed = parse_signature(_declaration_text(lines, i + 1))
        except SignatureSyntaxError:
            continue
        functions.append(ExportedFunction(
            name=marker.group(1),
            params=parsed.params,
            return_type=parsed.return_type,
        ))

    return functions


def generate_dts(functions: Sequence[ExportedFunction]) -> str:
    """Render ambient declarations for the generated wrapper module"""
    lines = ["// Generated by use-golang. Do not edit.", ""]

    if not functions:
        lines.append("export default any;")
        return "\n".join(lines) + "\n"

    for func in functions:
        params = ", ".join(f"{p.name}: {go_type_to_ts(p.type)}" for p in func.params)
        lines.append(f"export function {func.name}({params}): {go_type_to_ts(func.return_type)};")

    lines.append("")
    lines.append("declare const bindings: {")
    for func in functions:
        lines.append(f"  {func.name}: typeof {func.name};")
    lines.append("};")
    lines.append("export default bindings;")
    return "\n".join(lines) + "\n"
