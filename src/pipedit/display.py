"""Rich terminal rendering of the processor forest and its drop zones."""

from rich.console import Console
from rich.style import Style
from rich.table import Table
from rich.text import Text
from rich.tree import Tree

from pipedit.config.schema import DisplayConfig
from pipedit.interaction.legality import is_drop_zone_disabled
from pipedit.interaction.state import DropPosition, DropZone, InteractionState
from pipedit.tree.node import Forest, ProcessorNode
from pipedit.tree.selector import Selector

ROOT_LABELS: dict[str, str] = {
    "processors": "Processors",
    "onFailure": "Failure processors",
}

ROOT_STYLE = Style(bold=True)
PICKED_STYLE = Style(color="blue", bold=True)
SELECTOR_STYLE = Style(dim=True)
LEGAL_ZONE_STYLE = Style(color="green")
DISABLED_ZONE_STYLE = Style(color="red", dim=True)

ZONE_ICONS: dict[DropPosition, str] = {
    DropPosition.ABOVE: "⤒",
    DropPosition.BELOW: "⤓",
    DropPosition.EMPTY: "∅",
}


class ForestDisplay:
    """Renders a forest as a rich tree plus a drop-zone table."""

    def __init__(
        self,
        console: Console | None = None,
        config: DisplayConfig | None = None,
    ) -> None:
        """Initialize the display.

        Args:
            console: Rich console (uses default if None)
            config: Display configuration (defaults if None)
        """
        self.console = console or Console()
        self.config = config or DisplayConfig()

    def _label(self, node: ProcessorNode, selector: Selector, picked: Selector | None) -> Text:
        text = Text()
        style = PICKED_STYLE if selector == picked else Style()
        text.append(node.content.type, style=style)
        if self.config.show_selectors:
            text.append(f"  {selector}", style=SELECTOR_STYLE)
        if self.config.show_ids:
            text.append(f"  [{node.id}]", style=SELECTOR_STYLE)
        return text

    def _add_sequence(
        self,
        branch: Tree,
        base: Selector,
        sequence: list[ProcessorNode],
        picked: Selector | None,
    ) -> None:
        for index, node in enumerate(sequence):
            selector = base.child(index)
            child = branch.add(self._label(node, selector, picked))
            if node.on_failure:
                failure = child.add(Text("on failure", style=SELECTOR_STYLE))
                self._add_sequence(failure, selector.on_failure(), node.on_failure, picked)

    def build_tree(self, forest: Forest, state: InteractionState | None = None) -> Tree:
        """Build the rich tree for ``forest``, highlighting the picked node."""
        picked = state.picked.selector if state and state.picked else None
        tree = Tree(Text("Pipeline", style=ROOT_STYLE))
        for name, sequence in forest.roots():
            branch = tree.add(Text(ROOT_LABELS[name], style=ROOT_STYLE))
            self._add_sequence(branch, Selector.root(name), sequence, picked)
        return tree

    def show_forest(self, forest: Forest, state: InteractionState | None = None) -> None:
        self.console.print(self.build_tree(forest, state))

    def build_zone_table(self, zones: list[DropZone], state: InteractionState) -> Table:
        """Table of drop zones with their legality in ``state``."""
        table = Table(title="Drop zones")
        table.add_column("", width=2)
        table.add_column("Destination")
        table.add_column("Anchor")
        table.add_column("Status")

        for zone in zones:
            disabled = is_drop_zone_disabled(zone, state)
            anchor = str(zone.anchor.selector) if zone.anchor else "-"
            table.add_row(
                ZONE_ICONS[zone.position],
                str(zone.destination),
                anchor,
                Text(
                    "disabled" if disabled else "legal",
                    style=DISABLED_ZONE_STYLE if disabled else LEGAL_ZONE_STYLE,
                ),
            )
        return table

    def show_drop_zones(self, zones: list[DropZone], state: InteractionState) -> None:
        self.console.print(self.build_zone_table(zones, state))
