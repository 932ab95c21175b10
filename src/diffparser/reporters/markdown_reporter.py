"""Markdown diff summary reporter for diffparser."""

from __future__ import annotations

from pathlib import Path

from diffparser.models import Diff

_MODE_LABEL = {
    "DELETED": "deleted",
    "MODIFIED": "modified",
    "NEW": "new",
    "RENAMED": "renamed",
}


class MarkdownReporter:
    """Render a parsed Diff as a human-readable Markdown summary."""

    def render(self, diff: Diff) -> str:
        """Render a summary table and the hunk list of every file."""
        lines: list[str] = ["# Diff Summary", ""]

        if not diff.files:
            lines.append("No files changed.")
            return "\n".join(lines) + "\n"

        total_added = sum(len(f.added_lines) for f in diff.files)
        total_removed = sum(len(f.removed_lines) for f in diff.files)
        lines.append(
            f"**{len(diff.files)}** file(s) changed, "
            f"**+{total_added}** / **-{total_removed}** lines"
        )
        lines.append("")
        lines.append("| File | Mode | Hunks | Added | Removed |")
        lines.append("|------|------|-------|-------|---------|")
        for f in diff.files:
            name = f.path
            if f.orig_name and f.new_name and f.orig_name != f.new_name:
                name = f"{f.orig_name} → {f.new_name}"
            lines.append(
                f"| `{name}` | {_MODE_LABEL[f.mode.value]} | {len(f.hunks)} "
                f"| +{len(f.added_lines)} | -{len(f.removed_lines)} |"
            )

        for f in diff.files:
            if not f.hunks:
                continue
            lines.append("")
            lines.append(f"## `{f.path}`")
            lines.append("")
            for hunk in f.hunks:
                orig, new = hunk.orig_range, hunk.new_range
                span = f"-{orig.start},{orig.length} +{new.start},{new.length}"
                heading = f" {hunk.header}" if hunk.header else ""
                lines.append(f"- `@@ {span} @@`{heading} ({hunk.length} diff lines)")

        return "\n".join(lines) + "\n"

    def write(self, diff: Diff, output_path: str) -> None:
        """Write the Markdown summary to a file."""
        path = Path(output_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(diff), encoding="utf-8")
