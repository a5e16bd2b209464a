"""
Build slot naming helpers
"""

import hashlib
import re

FILE_ID_LENGTH = 8


def generate_file_id(file_path: str) -> str:
    """Short, stable digest of a module path"""
    return hashlib.md5(file_path.encode("utf-8")).hexdigest()[:FILE_ID_LENGTH]


def sanitize_path(file_path: str) -> str:
    """Readable, filesystem-safe form of a module path"""
    return re.sub(r"[/\\.]", "_", re.sub(r"^[/\\]", "", file_path))


def slot_name(file_path: str) -> str:
    """
    Build slot identifier for a module: ``<sanitized path>_<md5 prefix>``

    The sanitized half is for humans; the hash half separates paths that
    sanitize to the same name (``a/b.js`` vs ``a_b/js``). Two distinct paths
    with equal sanitized names still collide if their 32-bit md5 prefixes do.
    """
    return f"{sanitize_path(file_path)}_{generate_file_id(file_path)}"
