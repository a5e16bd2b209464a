"""Tests for directive detection and extraction."""
import pytest

from usegolang.detector import detect_go_directive, extract_go_code
from usegolang.errors import DirectiveNotFoundError, EmptyGuestCodeError


class TestDetectGoDirective:
    """Test detect_go_directive."""

    @pytest.mark.parametrize("code", [
        '"use golang"\npackage main',
        "'use golang'\npackage main",
        '"use golang";\nfunc main() {}',
        '  "use golang"  \nfunc main() {}',
        '\n\n"use golang"\nfunc main() {}',
    ])
    def test_detects_directive(self, code):
        assert detect_go_directive(code) is True

    def test_ignores_line_comment(self):
        assert detect_go_directive("// use golang\nconst x = 1;") is False

    def test_ignores_commented_directive(self):
        assert detect_go_directive('// "use golang"\nconst x = 1;') is False

    def test_ignores_directive_after_other_code(self):
        assert detect_go_directive('const x = 1;\n"use golang"\n') is False

    def test_ignores_other_directives(self):
        assert detect_go_directive('"use strict"\nconst x = 1;') is False


class TestExtractGoCode:
    """Test extract_go_code."""

    def test_extract_after_directive(self):
        code = '"use golang";\n\npackage main\n\nfunc main() {}'
        assert extract_go_code(code) == "package main\n\nfunc main() {}"

    def test_directive_without_semicolon(self):
        assert extract_go_code('"use golang"\npackage main') == "package main"

    @pytest.mark.parametrize("body", [
        "func main() {}",
        "\n\n  func main() {}\n\n",
        "import \"fmt\"\n\nfunc main() { fmt.Println(1) }\n",
    ])
    def test_left_inverse_modulo_trim(self, body):
        assert extract_go_code('"use golang"\n' + body) == body.strip()

    def test_missing_directive(self):
        with pytest.raises(DirectiveNotFoundError) as exc:
            extract_go_code("const x = 1;")
        assert str(exc.value).startswith("[use-golang]")

    def test_empty_body(self):
        with pytest.raises(EmptyGuestCodeError):
            extract_go_code('"use golang";\n   \n')
