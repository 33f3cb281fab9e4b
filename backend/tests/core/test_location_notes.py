"""Location Notes — markdown note for an asset's location change."""

from assetquery.core.location_notes import LocationRef, get_location_update_note_content

WAREHOUSE = LocationRef(id="loc-1", name="Warehouse ")
OFFICE = LocationRef(id="loc-2", name="Office")


def test_set_location():
    note = get_location_update_note_content(None, OFFICE, "Ada", "Lovelace", "Drill")
    assert note == (
        "**Ada Lovelace** set the location of **Drill** to "
        "**[Office](/locations/loc-2)**"
    )


def test_update_location():
    note = get_location_update_note_content(WAREHOUSE, OFFICE, "Ada", "Lovelace", "Drill")
    assert note == (
        "**Ada Lovelace** updated the location of **Drill** from "
        "**[Warehouse](/locations/loc-1)** to **[Office](/locations/loc-2)**"
    )


def test_remove_location():
    note = get_location_update_note_content(
        WAREHOUSE, OFFICE, " Ada", "Lovelace ", "Drill", is_removing=True,
    )
    assert note == (
        "**Ada Lovelace** removed **Drill** from location "
        "**[Warehouse](/locations/loc-1)**"
    )


def test_no_new_location_counts_as_removal():
    note = get_location_update_note_content(WAREHOUSE, None, "Ada", "Lovelace", "Drill")
    assert note.startswith("**Ada Lovelace** removed **Drill**")


def test_nothing_to_describe():
    assert get_location_update_note_content(None, None, "Ada", "Lovelace", "Drill") == ""
