"""Rich terminal formatter for Strata."""

from __future__ import annotations

import io
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from ..analysis.models import CorpusAnalysis
from ..classification.models import Layer
from ..estimation.summary import PRIORITY_HIGH, PRIORITY_MEDIUM
from .base import VIEW_ENTITIES, BaseFormatter, RenderOptions

_LAYER_STYLES = {
    Layer.CORE: "bold cyan",
    Layer.INTERFACE: "magenta",
    Layer.DERIVED: "green",
    Layer.UTILITY: "yellow",
}


def _layer_label(layer: Optional[Layer]) -> str:
    if layer is None:
        return "[dim]unknown[/dim]"
    style = _LAYER_STYLES[layer]
    return f"[{style}]{layer.label}[/{style}]"


def _tier_label(tier: str) -> str:
    if tier == PRIORITY_HIGH:
        return "[red bold]high[/red bold]"
    elif tier == PRIORITY_MEDIUM:
        return "[yellow]medium[/yellow]"
    else:
        return "[green]low[/green]"


class RichFormatter(BaseFormatter):
    """Rich terminal output: summary panel plus a file or entity table."""

    def __init__(self, console: Optional[Console] = None) -> None:
        self._console = console

    @property
    def console(self) -> Console:
        # Resolved lazily so output follows whatever stdout is current.
        return self._console or Console()

    def render(self, analysis: CorpusAnalysis, options: RenderOptions = RenderOptions()) -> None:
        console = self.console
        self._print_summary(console, analysis)
        if options.view == VIEW_ENTITIES:
            self._print_entities(console, analysis, options.layer)
        else:
            self._print_files(console, analysis, options.top)

    def format(self, analysis: CorpusAnalysis, options: RenderOptions = RenderOptions()) -> str:
        buffer = io.StringIO()
        console = Console(file=buffer, width=120, color_system=None)
        RichFormatter(console).render(analysis, options)
        return buffer.getvalue()

    def _print_summary(self, console: Console, analysis: CorpusAnalysis) -> None:
        s = analysis.summary
        statuses = ", ".join(f"{k} {v}" for k, v in s.status_counts.items())
        layers = "  ".join(
            f"{_layer_label(Layer(k))} {v}" for k, v in s.layer_counts.items()
        )
        body = (
            f"[bold]{escape(analysis.root)}[/bold]\n"
            f"Files: {s.total_files} ({statuses})   Lines: {s.total_loc}\n"
            f"Entities: {layers}\n"
            f"Estimate: [bold]{s.total_time}[/bold] (~{s.work_weeks} work weeks)"
        )
        console.print(Panel(body, title="[bold cyan]Strata[/bold cyan]", expand=False))

    def _print_files(self, console: Console, analysis: CorpusAnalysis, top: Optional[int]) -> None:
        priorities = list(analysis.priorities)
        if top is not None:
            priorities = priorities[:top]

        table = Table(title="Files by complexity", show_lines=False)
        table.add_column("File", style="bold")
        table.add_column("Layer")
        table.add_column("LOC", justify="right")
        table.add_column("Fn", justify="right")
        table.add_column("Cls", justify="right")
        table.add_column("Tpl", justify="right")
        table.add_column("Score", justify="right")
        table.add_column("Estimate", justify="right")
        table.add_column("Priority")

        for p in priorities:
            module = analysis.modules[p.path]
            m = module.metrics
            table.add_row(
                escape(p.path),
                _layer_label(module.file_layer),
                str(m.loc),
                str(m.functions),
                str(m.classes),
                str(m.templates),
                f"{p.score:.1f}",
                str(p.estimated_time),
                _tier_label(p.tier),
            )
        console.print(table)

        skipped = [m for m in analysis.modules.values() if m.reason is not None]
        if skipped:
            console.print(f"\n[dim]{len(skipped)} file(s) not analyzed:[/dim]")
            for module in skipped:
                console.print(f"  [dim]{escape(module.path)}  {escape(module.status_label)}[/dim]")

    def _print_entities(
        self, console: Console, analysis: CorpusAnalysis, layer: Optional[Layer]
    ) -> None:
        graph = analysis.graph
        entities = graph.by_layer(layer) if layer is not None else list(graph.entities.values())

        table = Table(title="Entities")
        table.add_column("Entity", style="bold")
        table.add_column("Layer")
        table.add_column("Rule", style="dim")
        table.add_column("Methods", justify="right")
        table.add_column("Bases", justify="right")
        table.add_column("Depends on", justify="right")
        table.add_column("Used by", justify="right")
        table.add_column("Files", justify="right")

        for e in entities:
            table.add_row(
                escape(e.name),
                _layer_label(e.layer),
                e.rule,
                str(len(e.methods)),
                str(len(e.inherits_from)),
                str(len(e.depends_on)),
                str(len(e.used_by)),
                str(len(e.occurrences)),
            )
        console.print(table)

        if graph.layer_conflicts:
            console.print("\n[yellow]Layer conflicts:[/yellow]")
            for name, layers in graph.layer_conflicts.items():
                labels = ", ".join(sorted(l.label for l in layers))
                console.print(f"  {escape(name)}: {labels}")

        if graph.unresolved_names:
            names = sorted(graph.unresolved_names)
            shown = ", ".join(escape(n) for n in names[:20])
            more = f" (+{len(names) - 20} more)" if len(names) > 20 else ""
            console.print(f"\n[dim]Unresolved names ({len(names)}): {shown}{more}[/dim]")
