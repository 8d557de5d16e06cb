import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rapidfuzz import fuzz, process

from config import settings
from dataset import DatasetError, load_dataset
from geo import haversine_miles

# In-memory dataset, in file order, plus an index keyed by upper-case id
AIRPORTS: List[Dict[str, Any]] = []
AIRPORT_INDEX: Dict[str, Dict[str, Any]] = {}

_SAFE_ID = re.compile(r"^[A-Za-z0-9_-]+$")


def _parse_coords(item: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    try:
        lat = float(item.get("latitude"))
        lon = float(item.get("longitude"))
    except (TypeError, ValueError):
        return None
    if lat != lat or lon != lon:  # NaN
        return None
    return {**item, "latitude": lat, "longitude": lon}


def set_airports(items: List[Dict[str, Any]]) -> None:
    """Replace the in-memory dataset. Items without usable coordinates are skipped."""
    global AIRPORTS, AIRPORT_INDEX

    parsed = [p for p in (_parse_coords(i) for i in items) if p is not None]
    AIRPORTS = parsed
    AIRPORT_INDEX = {}
    for item in parsed:
        if item.get("id") is None:
            continue
        AIRPORT_INDEX.setdefault(str(item["id"]).strip().upper(), item)


def load_airports(path: Optional[str] = None) -> None:
    """
    Load the reconciled dataset (public/data.json) into memory.

    A missing or malformed file leaves the index empty; the map then
    simply shows no airports.
    """
    path = Path(path or settings.data_path)

    try:
        items = load_dataset(path)
    except DatasetError as e:
        print(f"[airports] {e}, airport lookup disabled")
        set_airports([])
        return

    set_airports(items)
    skipped = len(items) - len(AIRPORTS)
    print(f"[airports] Loaded {len(AIRPORTS)} airports from {path}")
    if skipped:
        print(f"[airports] Skipped {skipped} entries without usable coordinates")


def lookup_airport(code: str) -> Optional[Dict[str, Any]]:
    """
    Return airport record by id (case-insensitive).

    Returns None if not found or if the dataset failed to load.
    """
    if not code:
        return None
    if not AIRPORT_INDEX:
        return None

    return AIRPORT_INDEX.get(code.strip().upper())


def filter_airports(
    courtesy_car: bool = False,
    bicycles: bool = False,
    camping: bool = False,
    meals: bool = False,
    items: Optional[List[Dict[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    """
    Airports offering every checked amenity. Unchecked amenities don't
    restrict anything, so all False returns everything.
    """
    wanted = {
        "courtesy_car": courtesy_car,
        "bicycles": bicycles,
        "camping": camping,
        "meals": meals,
    }
    required = [field for field, on in wanted.items() if on]
    source = AIRPORTS if items is None else items

    return [a for a in source if all(a.get(field) for field in required)]


def airports_within(
    center_lat: float,
    center_lon: float,
    radius_miles: float,
    items: Optional[List[Dict[str, Any]]] = None,
) -> List[Dict[str, Any]]:
    source = AIRPORTS if items is None else items
    return [
        a
        for a in source
        if haversine_miles(center_lat, center_lon, a["latitude"], a["longitude"])
        <= radius_miles
    ]


def search_airports(query: str, limit: Optional[int] = None) -> List[Tuple[Dict[str, Any], float]]:
    """
    Fuzzy search over id and name, best match first.

    An exact id match always ranks first with score 100.
    Returns (airport, score) pairs with score >= search_score_cutoff.
    """
    q = (query or "").strip()
    if not q or not AIRPORTS:
        return []

    limit = limit or settings.search_limit
    choices = {
        i: f"{a.get('id') or ''} {a.get('name') or ''}".strip()
        for i, a in enumerate(AIRPORTS)
    }

    matches = process.extract(
        q,
        choices,
        scorer=fuzz.WRatio,
        processor=str.lower,
        score_cutoff=settings.search_score_cutoff,
        limit=limit,
    )
    results = [(AIRPORTS[key], float(score)) for _, score, key in matches]

    exact = lookup_airport(q)
    if exact is not None:
        results = [(a, s) for a, s in results if a is not exact]
        results.insert(0, (exact, 100.0))

    return results[:limit]


def image_path(code: str) -> Optional[Path]:
    """Directory scan / FAA diagram for an airport: <image_dir>/<ID>.png."""
    rec = lookup_airport(code)
    if rec is None:
        return None

    ident = str(rec["id"])
    if not _SAFE_ID.match(ident):
        return None

    path = Path(settings.image_dir) / f"{ident}.png"
    return path if path.is_file() else None
