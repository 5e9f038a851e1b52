"""Drop-target legality rule.

Pure predicates deciding whether a gap may receive the picked node. A gap is
disabled when dropping there would put the node back where it already is:

- the gap above the picked node itself
- the gap below the picked node itself
- the gap below the picked node's predecessor (same place as "above picked")

Every other gap is legal, including gaps in the other root and in nested
failure branches, except gaps inside the picked node's own branch.
"""

from pipedit.interaction.state import (
    DropPosition,
    DropZone,
    InteractionState,
    ProcessorInfo,
)


def is_drop_zone_above_disabled(processor: ProcessorInfo, picked: ProcessorInfo) -> bool:
    """Gap immediately above ``processor``."""
    # For a first-in-list pick this is also its only "above" gap
    return processor.id == picked.id


def is_drop_zone_below_disabled(processor: ProcessorInfo, picked: ProcessorInfo) -> bool:
    """Gap immediately below ``processor``."""
    return processor.id == picked.id or processor.below_id == picked.id


def is_drop_zone_disabled(zone: DropZone, state: InteractionState) -> bool:
    """Whether ``zone`` must be rendered disabled in ``state``."""
    picked = state.picked
    if state.is_idle or picked is None:
        return True

    if zone.destination.is_descendant_of(picked.selector):
        return True

    if zone.anchor is None:
        return False
    if zone.position == DropPosition.ABOVE:
        return is_drop_zone_above_disabled(zone.anchor, picked)
    return is_drop_zone_below_disabled(zone.anchor, picked)


def legal_drop_zones(zones: list[DropZone], state: InteractionState) -> list[DropZone]:
    """Filter ``zones`` down to those enabled in ``state``."""
    return [zone for zone in zones if not is_drop_zone_disabled(zone, state)]
