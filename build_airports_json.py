import csv
import json
from pathlib import Path
from typing import Iterable, Optional

from pydantic import BaseModel

from config import settings


class ConvertStats(BaseModel):
    rows: int
    kept: int
    size_bytes: int


def build_airports_json(
    csv_path: Path,
    json_path: Path,
    allowed_types: Optional[Iterable[str]] = None,
) -> ConvertStats:
    """
    Convert an OurAirports-style CSV extract into a compact JSON array like:

      [
        {"id": "KMSP", "name": "Minneapolis-St Paul Intl", "lat": 44.88,
         "lon": -93.22, "type": "large_airport"},
        ...
      ]

    Expected CSV columns:
      - ident          (airport identifier, e.g. KMSP, Y47)
      - type           (small_airport, heliport, closed, ...)
      - name
      - latitude_deg
      - longitude_deg

    Only rows whose type is in `allowed_types` are kept (balloonports,
    heliports and closed fields are dropped by default).
    """
    csv_path = Path(csv_path)
    json_path = Path(json_path)
    allowed = set(allowed_types if allowed_types is not None else settings.allowed_types)

    airports = []
    rows = 0

    with csv_path.open(newline="", encoding="utf-8") as f:
        reader = csv.DictReader(f)

        for row in reader:
            rows += 1

            ident = (row.get("ident") or "").strip()
            name = (row.get("name") or "").strip()
            kind = (row.get("type") or "").strip()

            if not ident or not name:
                continue

            try:
                lat = float(row.get("latitude_deg") or "")
                lon = float(row.get("longitude_deg") or "")
            except (TypeError, ValueError):
                # Bad / missing coordinates, skip
                continue

            if kind not in allowed:
                continue

            airports.append(
                {
                    "id": ident,
                    "name": name,
                    "lat": lat,
                    "lon": lon,
                    "type": kind,
                }
            )

    json_path.parent.mkdir(parents=True, exist_ok=True)
    json_path.write_text(
        json.dumps(airports, ensure_ascii=False, separators=(",", ":")),
        encoding="utf-8",
    )

    stats = ConvertStats(rows=rows, kept=len(airports), size_bytes=json_path.stat().st_size)
    print(f"Processed {stats.rows} rows")
    print(f"Kept {stats.kept} valid airports")
    print(f"Output file: {json_path}")
    print(f"File size: {stats.size_bytes / 1024 / 1024:.2f} MB")
    return stats


if __name__ == "__main__":
    build_airports_json(Path(settings.airports_csv_path), Path(settings.airports_all_path))
