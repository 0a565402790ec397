"""Componentes de UI para CLI (Rich).

Por qué componentes separados:
- Mantiene la lógica de comandos desacoplada de detalles visuales.
- Permite que `bootstrap` y `doctor` reutilicen las mismas tablas y paneles.
"""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from core.domain.models import DomainSpec, ScoreSpec, TagSet

_SENTIMENT_STYLES = {
    "negative": "red",
    "neutral": "yellow",
    "positive": "green",
}


def print_banner(console: Console) -> None:
    title = Text("NPS", style="bold cyan")
    subtitle = Text("Slash-command ratings • Badges • Spec bootstrap", style="dim")
    body = Align.center(Text.assemble(title, "\n", subtitle), vertical="middle")
    console.print(Panel(body, border_style="cyan", padding=(1, 4)))


def build_domains_table(spec: DomainSpec) -> Table:
    table = Table(title=f"Domains ({spec.get_name()})")
    table.add_column("Domain", style="cyan", no_wrap=True)
    table.add_column("Offering id", style="dim")
    table.add_column("Offering", style="white")
    for domain in sorted(spec.get_domains_as_list(), key=lambda d: d.get_name()):
        for index, offering in enumerate(domain.get_offerings()):
            table.add_row(domain.get_name() if index == 0 else "", offering.id, offering.name)
    return table


def build_tags_table(tag_sets: list[TagSet]) -> Table:
    table = Table(title="Tag sets")
    table.add_column("Set", style="cyan", no_wrap=True)
    table.add_column("Tag id", style="dim")
    table.add_column("Tag", style="white")
    if not tag_sets:
        table.add_row("-", "-", "no tags configured")
    for tag_set in tag_sets:
        for index, tag in enumerate(tag_set.get_tags()):
            table.add_row(tag_set.get_name() if index == 0 else "", tag.id, tag.name)
    return table


def build_scores_table(spec: ScoreSpec) -> Table:
    table = Table(title="Scores")
    table.add_column("Value", style="cyan", justify="right")
    table.add_column("Name", style="white")
    table.add_column("Sentiment")
    for score in spec.get_scores():
        sentiment = score.sentiment.value if score.sentiment else "-"
        style = _SENTIMENT_STYLES.get(sentiment, "dim")
        table.add_row(f"{score.value:g}", score.name, Text(sentiment, style=style))
    return table
