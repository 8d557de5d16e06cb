from reconcile import (
    KEPT_EXISTING,
    RENAMED,
    REPLACED,
    amenity_count,
    check_unique_ids,
    find_missing_fields,
    reconcile,
    reconcile_with_report,
    same_location,
)

from conftest import make_airport


def ids(records):
    return [r["id"] for r in records]


# Unique ids pass through untouched and in order
def test_unique_input_unchanged(sample_items):
    out = reconcile(sample_items)
    assert out == sample_items
    assert ids(out) == ["KMSP", "Y47", "2Y2", "KANE"]


# Same id, same place: the record with more amenities wins
def test_merge_keeps_richer_record():
    poor = make_airport("ABC", 45.0, -93.0, "Poor", meals=True)
    rich = make_airport("ABC", 45.0005, -93.0005, "Rich", courtesy_car=True, bicycles=True, camping=True)

    out = reconcile([poor, rich])

    assert len(out) == 1
    assert out[0]["name"] == "Rich"


# Ties and poorer duplicates keep the record already there
def test_merge_tie_keeps_existing():
    first = make_airport("ABC", 45.0, -93.0, "First", meals=True)
    second = make_airport("ABC", 45.0, -93.0, "Second", camping=True)

    result = reconcile_with_report([first, second])

    assert [r["name"] for r in result.items] == ["First"]
    assert result.collisions[0].action == KEPT_EXISTING
    assert result.collisions[0].same_location


# Replacement happens in place, not at the end
def test_merge_replaces_in_position():
    items = [
        make_airport("ABC", 45.0, -93.0, "Old"),
        make_airport("DEF", 46.0, -94.0),
        make_airport("ABC", 45.0, -93.0, "New", meals=True),
    ]

    result = reconcile_with_report(items)

    assert ids(result.items) == ["ABC", "DEF"]
    assert result.items[0]["name"] == "New"
    assert result.collisions[0].action == REPLACED


# Same id, different place: second one gets a suffix
def test_rename_on_different_location():
    a = make_airport("ABC", 45.0, -93.0)
    b = make_airport("ABC", 45.0, -93.002)

    result = reconcile_with_report([a, b])

    assert ids(result.items) == ["ABC", "ABC_1"]
    assert result.collisions[0].action == RENAMED
    assert result.collisions[0].result_id == "ABC_1"
    assert not result.collisions[0].same_location


# Three far-apart airports sharing one id
def test_chained_rename():
    items = [
        make_airport("XYZ", 40.0, -90.0, "One"),
        make_airport("XYZ", 41.0, -91.0, "Two"),
        make_airport("XYZ", 42.0, -92.0, "Three"),
    ]

    out = reconcile(items)

    assert ids(out) == ["XYZ", "XYZ_1", "XYZ_2"]
    assert [r["name"] for r in out] == ["One", "Two", "Three"]


# A suffix already used by an input id is skipped
def test_rename_skips_taken_suffix():
    items = [
        make_airport("XYZ", 40.0, -90.0),
        make_airport("XYZ_1", 10.0, -10.0),
        make_airport("XYZ", 41.0, -91.0),
    ]

    assert ids(reconcile(items)) == ["XYZ", "XYZ_1", "XYZ_2"]


# Renamed records are copies; the input is left alone
def test_input_not_mutated():
    a = make_airport("ABC", 45.0, -93.0)
    b = make_airport("ABC", 50.0, -93.0)

    reconcile([a, b])

    assert b["id"] == "ABC"


# Tolerance is strict: exactly 0.001 apart is a different airport
def test_same_location_boundary():
    a = make_airport("A", 45.0, -93.0)
    assert same_location(a, make_airport("A", 45.0009, -93.0009))
    assert not same_location(a, make_airport("A", 45.0, -93.0011))
    assert not same_location(a, make_airport("A", 45.0011, -93.0))

    origin = make_airport("A", 0.0, 0.0)
    assert not same_location(origin, make_airport("A", 0.001, 0.0))
    assert not same_location(origin, make_airport("A", 0.0, 0.001))


# Coordinates given as strings are compared numerically
def test_same_location_string_coords():
    assert same_location(
        make_airport("A", "45.0001", "-93.0"),
        make_airport("A", 45.0, -93.0001),
    )


# Unreadable coordinates never match, so the duplicate is renamed
def test_missing_coords_rename():
    items = [make_airport("A", 45.0, -93.0), {"id": "A", "name": "No coords"}]

    assert ids(reconcile(items)) == ["A", "A_1"]


# Counting only truthy amenity fields
def test_amenity_count():
    rec = make_airport("A", 0, 0, courtesy_car=True, bicycles=False, camping=1, meals="")
    assert amenity_count(rec) == 2
    assert amenity_count(make_airport("B", 0, 0)) == 0


# Running twice gives the same result as running once
def test_idempotent():
    items = [
        make_airport("A", 45.0, -93.0),
        make_airport("A", 45.0, -93.0, meals=True),
        make_airport("A", 46.0, -93.0),
        make_airport("B", 47.0, -93.0),
        make_airport("A", 48.0, -93.0),
    ]

    once = reconcile(items)
    assert reconcile(once) == once


# Output ids are unique and the output is never longer than the input
def test_uniqueness_and_cardinality():
    items = [make_airport(code, 40.0 + i, -90.0) for i, code in enumerate("AABBBCA")]

    out = reconcile(items)
    total, unique = check_unique_ids(out)

    assert total == unique == len(out)
    assert len(out) <= len(items)


# A same-location duplicate is merged away
def test_merge_shrinks_output():
    items = [make_airport("A", 45.0, -93.0), make_airport("A", 45.0, -93.0)]
    assert len(reconcile(items)) == 1


# Non-colliding ids keep their relative order
def test_order_preserved_for_non_colliding():
    items = [
        make_airport("C", 1.0, 1.0),
        make_airport("A", 2.0, 2.0),
        make_airport("C", 1.0, 1.0),
        make_airport("B", 3.0, 3.0),
    ]

    assert ids(reconcile(items)) == ["C", "A", "B"]


# Records without an id are carried through where they are
def test_records_without_id_kept():
    items = [
        make_airport("A", 1.0, 1.0),
        {"name": "Mystery strip", "latitude": 2.0, "longitude": 2.0},
        {"name": "Another", "latitude": 3.0, "longitude": 3.0},
    ]

    out = reconcile(items)

    assert len(out) == 3
    assert out[1]["name"] == "Mystery strip"


# Missing required fields are reported, not dropped
def test_find_missing_fields():
    items = [
        make_airport("A", 1.0, 1.0),
        {"id": "B", "name": "No lat", "longitude": 2.0},
        {"name": "No id", "latitude": 3.0, "longitude": ""},
    ]

    problems = find_missing_fields(items)

    assert [p.index for p in problems] == [1, 2]
    assert problems[0].missing == ["latitude"]
    assert problems[1].missing == ["id", "longitude"]


# Duplicate ids show up in the self-check
def test_check_unique_ids_detects_duplicates():
    items = [make_airport("A", 1, 1), make_airport("A", 2, 2), make_airport("B", 3, 3)]
    assert check_unique_ids(items) == (3, 2)


# Renames alone keep the record count even though input ids repeat
def test_rename_only_keeps_length():
    items = [make_airport("A", 45.0, -93.0), make_airport("A", 50.0, -93.0)]

    out = reconcile(items)

    assert len(out) == len(items)
    assert ids(out) == ["A", "A_1"]


# An input id that only clashes with a generated one is not a raw duplicate
def test_clash_with_generated_id_is_tagged():
    items = [
        make_airport("A", 1.0, 1.0),
        make_airport("A", 5.0, 5.0),
        make_airport("A_1", 9.0, 9.0),
    ]

    result = reconcile_with_report(items)

    assert ids(result.items) == ["A", "A_1", "A_1_1"]
    assert [c.generated for c in result.collisions] == [False, True]
    assert result.raw_collisions == 1
    assert result.collisions[1].action == RENAMED


# An input id colliding with an earlier input id stays a raw duplicate,
# even when a rename produced the same id in between
def test_raw_duplicate_after_generated_id():
    items = [
        make_airport("A", 1.0, 1.0),
        make_airport("A", 5.0, 5.0),
        make_airport("A_1", 9.0, 9.0),
        make_airport("A_1", 20.0, 20.0),
    ]

    result = reconcile_with_report(items)

    assert [c.generated for c in result.collisions] == [False, True, False]
    assert result.raw_collisions == 2


# Empty-string ids count as missing: passed through, never renamed
def test_empty_id_passed_through():
    items = [
        {"id": "", "name": "One", "latitude": 1.0, "longitude": 1.0},
        {"id": "", "name": "Two", "latitude": 5.0, "longitude": 5.0},
    ]

    result = reconcile_with_report(items)

    assert ids(result.items) == ["", ""]
    assert result.collisions == []
    assert [p.missing for p in find_missing_fields(items)] == [["id"], ["id"]]
    assert check_unique_ids(result.items) == (0, 0)
