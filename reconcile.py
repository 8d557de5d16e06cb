from typing import Any, Dict, Iterable, List, Optional, Tuple

from pydantic import BaseModel

from config import settings

Record = Dict[str, Any]

REQUIRED_FIELDS = ("id", "latitude", "longitude")

# Collision actions
KEPT_EXISTING = "kept_existing"
REPLACED = "replaced"
RENAMED = "renamed"


# ---------------------------------------------------------------------
# Report models
# ---------------------------------------------------------------------


class RecordSummary(BaseModel):
    name: Any = None
    lat: Any = None
    lon: Any = None
    elevation: Any = None


class Collision(BaseModel):
    id: str
    index: int                  # position of the colliding record in the input
    existing: RecordSummary
    duplicate: RecordSummary
    same_location: bool
    action: str                 # kept_existing / replaced / renamed
    result_id: str
    generated: bool = False     # clashed only with an id made by an earlier rename


class MissingFields(BaseModel):
    index: int
    id: Optional[str] = None
    name: Any = None
    missing: List[str]


class ReconcileResult(BaseModel):
    items: List[Dict[str, Any]]
    collisions: List[Collision] = []

    @property
    def raw_collisions(self) -> int:
        return sum(1 for c in self.collisions if not c.generated)

    @property
    def removed(self) -> int:
        return sum(1 for c in self.collisions if c.action != RENAMED)

    @property
    def renamed(self) -> int:
        return sum(1 for c in self.collisions if c.action == RENAMED)


def has_id(record: Record) -> bool:
    return record.get("id") not in (None, "")


def summarize(record: Record) -> RecordSummary:
    return RecordSummary(
        name=record.get("name"),
        lat=record.get("latitude"),
        lon=record.get("longitude"),
        elevation=record.get("elevation"),
    )


# ---------------------------------------------------------------------
# Identity and amenity helpers
# ---------------------------------------------------------------------


def _coord(value: Any) -> Optional[float]:
    """Coordinate as float, or None if missing / not numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    if result != result:  # NaN
        return None
    return result


def same_location(a: Record, b: Record, tolerance: Optional[float] = None) -> bool:
    """
    True when both records sit within `tolerance` degrees of each other
    on latitude AND longitude.

    Records with unreadable coordinates never match anything.
    """
    if tolerance is None:
        tolerance = settings.location_tolerance_deg

    lat1, lon1 = _coord(a.get("latitude")), _coord(a.get("longitude"))
    lat2, lon2 = _coord(b.get("latitude")), _coord(b.get("longitude"))
    if None in (lat1, lon1, lat2, lon2):
        return False

    return abs(lat1 - lat2) < tolerance and abs(lon1 - lon2) < tolerance


def amenity_count(record: Record) -> int:
    """Number of truthy amenity fields (courtesy car, bicycles, ...)."""
    return sum(1 for field in settings.amenity_fields if record.get(field))


def _next_free_id(base: str, committed: Dict[str, int]) -> str:
    suffix = 1
    while f"{base}_{suffix}" in committed:
        suffix += 1
    return f"{base}_{suffix}"


# ---------------------------------------------------------------------
# Reconciler
# ---------------------------------------------------------------------


def reconcile_with_report(records: Iterable[Record]) -> ReconcileResult:
    """
    Make every id in `records` unique.

    Walks the records once, in order:

      - first time an id is seen: keep the record
      - id seen before, same location: keep whichever of the two has more
        amenities (ties keep the one already there); the other is dropped
      - id seen before, different location: keep it under the first free
        "<id>_1", "<id>_2", ... name

    Records without an id (missing or "") are passed through where they
    are. Input records are never modified; renamed ones are copies.
    """
    output: List[Record] = []
    position: Dict[str, int] = {}   # committed id -> index in output
    raw_ids = set()                 # ids as they appear in the input
    collisions: List[Collision] = []

    for index, record in enumerate(records):
        if not has_id(record):
            output.append(record)
            continue

        key = str(record["id"])
        generated = key in position and key not in raw_ids
        raw_ids.add(key)

        if key not in position:
            position[key] = len(output)
            output.append(record)
            continue

        existing = output[position[key]]
        duplicate_of = summarize(existing)

        if same_location(existing, record):
            if amenity_count(record) > amenity_count(existing):
                output[position[key]] = record
                action = REPLACED
            else:
                action = KEPT_EXISTING
            result_id = key
        else:
            result_id = _next_free_id(key, position)
            renamed = dict(record)
            renamed["id"] = result_id
            position[result_id] = len(output)
            output.append(renamed)
            action = RENAMED

        collisions.append(
            Collision(
                id=key,
                index=index,
                existing=duplicate_of,
                duplicate=summarize(record),
                same_location=action != RENAMED,
                action=action,
                result_id=result_id,
                generated=generated,
            )
        )

    return ReconcileResult(items=output, collisions=collisions)


def reconcile(records: Iterable[Record]) -> List[Record]:
    """Reconciled records only; see reconcile_with_report()."""
    return reconcile_with_report(records).items


# ---------------------------------------------------------------------
# Checks
# ---------------------------------------------------------------------


def find_missing_fields(records: Iterable[Record]) -> List[MissingFields]:
    """Records lacking id / latitude / longitude. They are not dropped."""
    problems: List[MissingFields] = []
    for index, record in enumerate(records):
        missing = [f for f in REQUIRED_FIELDS if record.get(f) in (None, "")]
        if missing:
            record_id = record.get("id")
            problems.append(
                MissingFields(
                    index=index,
                    id=str(record_id) if record_id is not None else None,
                    name=record.get("name"),
                    missing=missing,
                )
            )
    return problems


def check_unique_ids(records: Iterable[Record]) -> Tuple[int, int]:
    """
    Return (total ids, unique ids). They are equal when no duplicates remain.

    Records without an id are not counted.
    """
    ids = [str(r["id"]) for r in records if has_id(r)]
    return len(ids), len(set(ids))
