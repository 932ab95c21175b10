"""Shared test fixtures for diffparser tests."""

import pytest

from diffparser.diff_parser import parse_diff

SAMPLE_DIFF = """\
diff --git a/config.py b/config.py
index 83db48f..bf269f4 100644
--- a/config.py
+++ b/config.py
@@ -1,3 +1,4 @@ import os
 import os
+import hashlib
 DEBUG = True
-VERBOSE = True
diff --git a/removed.py b/removed.py
deleted file mode 100644
index 3b18e51..0000000
--- a/removed.py
+++ /dev/null
@@ -1,2 +0,0 @@
-print("hello")
-print("world")
"""


@pytest.fixture
def sample_diff_text():
    return SAMPLE_DIFF


@pytest.fixture
def sample_diff():
    """The sample diff, parsed."""
    return parse_diff(SAMPLE_DIFF)


@pytest.fixture
def diff_file(tmp_path):
    """The sample diff saved to disk."""
    path = tmp_path / "changes.diff"
    path.write_text(SAMPLE_DIFF, encoding="utf-8")
    return path
