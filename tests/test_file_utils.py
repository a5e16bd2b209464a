"""Tests for build slot naming."""
from usegolang.file_utils import generate_file_id, sanitize_path, slot_name


class TestSlotNaming:
    """Test slot naming helpers."""

    def test_file_id_is_short_hex(self):
        file_id = generate_file_id("/project/src/math.js")
        assert len(file_id) == 8
        int(file_id, 16)

    def test_file_id_is_md5_prefix(self):
        # md5("/src/a.js")
        import hashlib
        expected = hashlib.md5(b"/src/a.js").hexdigest()[:8]
        assert generate_file_id("/src/a.js") == expected

    def test_file_id_deterministic(self):
        assert generate_file_id("/a/b.js") == generate_file_id("/a/b.js")

    def test_sanitize_path(self):
        assert sanitize_path("/project/src/math.js") == "project_src_math_js"

    def test_sanitize_windows_path(self):
        assert sanitize_path("\\project\\math.js") == "project_math_js"

    def test_slot_name(self):
        path = "/project/src/math.js"
        assert slot_name(path) == f"project_src_math_js_{generate_file_id(path)}"

    def test_same_sanitized_name_different_slots(self):
        assert sanitize_path("/a/b.js") == sanitize_path("/a_b/js")
        assert slot_name("/a/b.js") != slot_name("/a_b/js")
