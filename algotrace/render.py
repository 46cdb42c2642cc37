"""Text and Mermaid views of steps."""

from __future__ import annotations

from typing import Any, Sequence

from .grid_types import Coord, GridSnapshot
from .trace_types import BacktrackStep, GridStep, PrefixSumStep, RegionResult, SpreadRound, Step
from .tree_types import CallTree, NodeStatus

_STATUS_STYLES: dict[NodeStatus, str] = {
    NodeStatus.ACTIVE: "fill:#2563eb,color:#fff",
    NodeStatus.RESULT: "fill:#10b981,color:#fff",
    NodeStatus.VISITED: "fill:#cbd5e1",
    NodeStatus.BACKTRACKED: "fill:#f1f5f9,color:#94a3b8",
    NodeStatus.PRUNED: "fill:#fee2e2,color:#b91c1c",
}


def _escape_mermaid(text: str) -> str:
    """Escape characters that break Mermaid node labels."""
    return text.replace('"', "#quot;").replace("<", "#lt;").replace(">", "#gt;")


def format_result(result: Any) -> str:
    if isinstance(result, RegionResult):
        return f"region {result.number} @ {list(result.root)}"
    if isinstance(result, SpreadRound):
        return f"minute {result.minute}: {[list(c) for c in result.cells]}"
    if isinstance(result, tuple):
        return "[" + ", ".join(str(v) for v in result) + "]"
    if isinstance(result, str):
        return f'"{result}"'
    return str(result)


def format_results(results: Sequence[Any], limit: int = 10) -> str:
    shown = [format_result(r) for r in results[-limit:]]
    hidden = len(results) - len(shown)
    prefix = f"... ({hidden} earlier) " if hidden else ""
    return prefix + ", ".join(shown) if shown else "(none)"


def format_grid(
    snapshot: GridSnapshot,
    frontier: Sequence[Coord] = (),
    changed: Sequence[Coord] = (),
    scan_pos: Coord | None = None,
) -> str:
    """Render a grid snapshot, marking changed (*), frontier (+) and scan (>) cells."""
    marked_frontier = set(frontier)
    marked_changed = set(changed)
    lines: list[str] = []
    for row in snapshot.rows:
        parts: list[str] = []
        for cell in row:
            if cell.coord in marked_changed:
                marker = "*"
            elif cell.coord in marked_frontier:
                marker = "+"
            elif cell.coord == scan_pos:
                marker = ">"
            else:
                marker = " "
            parts.append(f"{marker}{cell}")
        lines.append(" ".join(parts))
    return "\n".join(lines)


def format_step(step: Step) -> str:
    """One-line header for a step, e.g. ``[#3] choose: Choose 2``."""
    return f"[#{step.sequence_id}] {step.kind.value}: {step.description}"


def render_step(step: Step) -> str:
    """Multi-line view of a step: header, variant-specific state, results."""
    lines = [format_step(step)]
    if isinstance(step, BacktrackStep):
        path = "".join(str(v) for v in step.path) if all(
            isinstance(v, str) for v in step.path
        ) else format_result(tuple(step.path))
        lines.append(f"    path: {path or '[]'}  node: {step.focus_node_id}")
        if step.counters:
            lines.append(
                "    " + "  ".join(f"{name}={value}" for name, value in step.counters)
            )
    elif isinstance(step, GridStep):
        grid = format_grid(step.grid_snapshot, step.frontier, step.changed, step.scan_pos)
        lines.extend("    " + line for line in grid.splitlines())
        lines.append(
            f"    regions={step.region_count}  minute={step.minute}  "
            f"remaining={step.remaining}"
        )
    elif isinstance(step, PrefixSumStep):
        counts = ", ".join(f"{k}:{v}" for k, v in step.prefix_counts)
        lines.append(
            f"    index={step.index}  prefix={step.prefix_sum}  k={step.target}  "
            f"map={{{counts}}}"
        )
    lines.append(f"    results ({len(step.results_so_far)}): {format_results(step.results_so_far)}")
    return "\n".join(lines)


def tree_to_mermaid(tree: CallTree, step: BacktrackStep | None = None) -> str:
    """Convert a call tree to a Mermaid flowchart, styled by *step*'s statuses."""
    lines: list[str] = ["flowchart TD"]
    mermaid_ids = {node.node_id: f"t{i}" for i, node in enumerate(tree.nodes)}

    for node in tree.nodes:
        nid = mermaid_ids[node.node_id]
        if node.is_root:
            lines.append(f'    {nid}(["root"])')
            continue
        path = "".join(str(v) for v in node.path) if all(
            isinstance(v, str) for v in node.path
        ) else ",".join(str(v) for v in node.path)
        label = f"<b>{_escape_mermaid(node.label)}</b><br/>{_escape_mermaid(path)}"
        lines.append(f'    {nid}["{label}"]')

    for node in tree.nodes:
        if node.parent_id is not None:
            lines.append(f"    {mermaid_ids[node.parent_id]} --> {mermaid_ids[node.node_id]}")

    if step is not None:
        for node_id, status in step.node_statuses:
            style = _STATUS_STYLES.get(status)
            if style and node_id in mermaid_ids:
                lines.append(f"    style {mermaid_ids[node_id]} {style}")

    return "\n".join(lines)
