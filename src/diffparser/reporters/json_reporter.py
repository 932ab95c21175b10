"""JSON diff reporter for diffparser."""

from __future__ import annotations

import json
from pathlib import Path

from diffparser.models import Diff


class JSONReporter:
    """Serialize a parsed Diff to JSON format."""

    def render(self, diff: Diff) -> str:
        """Render the diff as a JSON string.

        Args:
            diff: The parsed diff to serialize.

        Returns:
            A formatted JSON string of files, hunks, ranges and lines.
        """
        return json.dumps(diff.to_dict(), indent=2, ensure_ascii=False)

    def write(self, diff: Diff, output_path: str) -> None:
        """Write the diff to a JSON file.

        Args:
            diff: The parsed diff to serialize.
            output_path: Path to the output file.
        """
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(diff), encoding="utf-8")
