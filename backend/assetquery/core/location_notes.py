"""Location Notes — markdown activity note for an asset's location change.

Invariants:
    - Names are stripped; locations render as links to /locations/<id>
    - Removing (explicitly, or by having no new location) wins over set/update
    - Returns "" when there is nothing to describe (no current and no new location)
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class LocationRef:
    id: str
    name: str


def _link(location: LocationRef) -> str:
    return f"**[{location.name.strip()}](/locations/{location.id})**"


def get_location_update_note_content(
    current_location: LocationRef | None,
    new_location: LocationRef | None,
    first_name: str,
    last_name: str,
    asset_name: str,
    is_removing: bool = False,
) -> str:
    user = f"**{first_name.strip()} {last_name.strip()}**"
    asset = f"**{asset_name.strip()}**"

    if is_removing or new_location is None:
        if current_location is None:
            return ""
        return f"{user} removed {asset} from location {_link(current_location)}"

    if current_location is None:
        return f"{user} set the location of {asset} to {_link(new_location)}"

    return (
        f"{user} updated the location of {asset} from "
        f"{_link(current_location)} to {_link(new_location)}"
    )
