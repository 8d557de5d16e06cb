import os
from typing import Tuple

from pydantic import BaseModel


def _csv_env(key: str, default: str) -> Tuple[str, ...]:
    raw = os.getenv(key, default)
    return tuple(part.strip() for part in raw.split(",") if part.strip())


class Settings(BaseModel):
    # Hand-maintained dataset ({"items": [...]}) and its backup
    data_path: str = os.getenv("AIRPORTMAP_DATA_PATH", "public/data.json")
    backup_suffix: str = os.getenv("AIRPORTMAP_BACKUP_SUFFIX", ".backup")

    # Converted public airport extract
    airports_csv_path: str = os.getenv("AIRPORTMAP_AIRPORTS_CSV", "airports_us.csv")
    airports_all_path: str = os.getenv(
        "AIRPORTMAP_AIRPORTS_ALL_PATH",
        "public/airports_all.json",
    )
    allowed_types: Tuple[str, ...] = _csv_env(
        "AIRPORTMAP_ALLOWED_TYPES",
        "small_airport,medium_airport,large_airport,seaplane_base",
    )

    # Directory scans / FAA diagrams, one <ID>.png per airport
    image_dir: str = os.getenv("AIRPORTMAP_IMAGE_DIR", "public/images")

    # Two records with the same id within this many degrees on both axes
    # are the same airport. Keep at 0.001 so merges match existing data.
    location_tolerance_deg: float = float(
        os.getenv("AIRPORTMAP_LOCATION_TOLERANCE_DEG", "0.001")
    )
    amenity_fields: Tuple[str, ...] = ("courtesy_car", "bicycles", "camping", "meals")

    # Map defaults
    center_lat: float = float(os.getenv("AIRPORTMAP_CENTER_LAT", "44.9778"))
    center_lon: float = float(os.getenv("AIRPORTMAP_CENTER_LON", "-93.2650"))
    radius_miles: float = float(os.getenv("AIRPORTMAP_RADIUS_MILES", "100"))

    # Search box
    search_limit: int = int(os.getenv("AIRPORTMAP_SEARCH_LIMIT", "10"))
    search_score_cutoff: float = float(
        os.getenv("AIRPORTMAP_SEARCH_SCORE_CUTOFF", "60")
    )

settings = Settings()
