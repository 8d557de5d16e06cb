import os
from typing import Any, Dict, List, Optional

from fastapi import FastAPI, HTTPException
from fastapi.responses import FileResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel, ConfigDict

from config import settings
from airports import (
    airports_within,
    filter_airports,
    image_path,
    load_airports,
    lookup_airport,
    search_airports,
)

app = FastAPI(title="Airport Amenity Map")

# Load airports data at startup
load_airports()

# Serve the built map front-end when it is there
if os.path.isdir("static"):
    app.mount("/static", StaticFiles(directory="static"), name="static")

    @app.get("/", response_class=FileResponse)
    async def index():
        """
        Serve the main HTML page.
        """
        return FileResponse("static/index.html")


class Airport(BaseModel):
    # Extra dataset fields (elevation, ...) pass straight through
    model_config = ConfigDict(extra="allow")

    id: Optional[str] = None
    name: Optional[str] = None
    latitude: float
    longitude: float
    courtesy_car: Any = None
    bicycles: Any = None
    camping: Any = None
    meals: Any = None


class SearchResult(BaseModel):
    airport: Airport
    score: float


class ConfigResponse(BaseModel):
    center_lat: float
    center_lon: float
    radius_miles: float


@app.get("/api/config", response_model=ConfigResponse)
async def api_get_config():
    """
    Return the default center and radius.

    Used as the initial map view; the browser's own location replaces
    the center once it is known.
    """
    return ConfigResponse(
        center_lat=settings.center_lat,
        center_lon=settings.center_lon,
        radius_miles=settings.radius_miles,
    )


def _as_airport(rec: Dict[str, Any]) -> Airport:
    rec = dict(rec)
    if rec.get("id") is not None:
        rec["id"] = str(rec["id"])
    return Airport(**rec)


@app.get("/api/airports", response_model=List[Airport])
async def api_airports(
    courtesy_car: bool = False,
    bicycles: bool = False,
    camping: bool = False,
    meals: bool = False,
    center_lat: Optional[float] = None,
    center_lon: Optional[float] = None,
    radius_miles: Optional[float] = None,
):
    """
    Return airports matching the amenity checkboxes.

    Query params:
      - courtesy_car / bicycles / camping / meals: only airports with that amenity
      - center_lat / center_lon / radius_miles (optional): only airports
        inside the circle; radius defaults to the configured one.
    """
    items = filter_airports(
        courtesy_car=courtesy_car,
        bicycles=bicycles,
        camping=camping,
        meals=meals,
    )

    if center_lat is not None and center_lon is not None:
        if radius_miles is None:
            radius_miles = settings.radius_miles
        if radius_miles < 0:
            raise HTTPException(status_code=422, detail="radius_miles must be >= 0")
        items = airports_within(center_lat, center_lon, radius_miles, items)

    return [_as_airport(a) for a in items]


@app.get("/api/airports/search", response_model=List[SearchResult])
async def api_search(q: str = "", limit: Optional[int] = None):
    """Fuzzy search by identifier or name for the search box."""
    if limit is not None and limit < 1:
        raise HTTPException(status_code=422, detail="limit must be >= 1")

    return [
        SearchResult(airport=_as_airport(a), score=score)
        for a, score in search_airports(q, limit)
    ]


@app.get("/api/airports/{code}", response_model=Airport)
async def api_get_airport(code: str):
    rec = lookup_airport(code)
    if not rec:
        raise HTTPException(status_code=404, detail="Unknown airport code")
    return _as_airport(rec)


@app.get("/api/airports/{code}/image", response_class=FileResponse)
async def api_get_airport_image(code: str):
    """Directory scan or FAA diagram shown in the marker popup."""
    path = image_path(code)
    if path is None:
        raise HTTPException(status_code=404, detail="No image for this airport")
    return FileResponse(path, media_type="image/png")


class CenterByAirport(BaseModel):
    airport: str  # airport id, e.g. "KMSP", "Y47"


class CenterResponse(BaseModel):
    center_lat: float
    center_lon: float
    name: Optional[str] = None
    code: Optional[str] = None
    center_label: Optional[str] = None
    elev_ft: Optional[float] = None  # field elevation in feet (MSL)


@app.post("/api/center/airport", response_model=CenterResponse)
async def api_set_center_airport(payload: CenterByAirport):
    """
    Resolve an airport identifier into a map center + display label +
    field elevation.

    Does not mutate any global state; the frontend keeps its own center.
    """
    rec = lookup_airport(payload.airport)
    if not rec:
        raise HTTPException(status_code=404, detail="Location identifier not found")

    code = str(rec.get("id") or payload.airport).strip().upper()
    name = rec.get("name") or ""
    label = f"{code} - {name}" if name else code

    elev_ft: Optional[float] = None
    raw = rec.get("elevation")
    if isinstance(raw, (int, float)) and not isinstance(raw, bool):
        elev_ft = float(raw)
    elif isinstance(raw, str) and raw.strip():
        try:
            elev_ft = float(raw.strip())
        except ValueError:
            elev_ft = None

    return CenterResponse(
        center_lat=rec["latitude"],
        center_lon=rec["longitude"],
        name=name,
        code=code,
        center_label=label,
        elev_ft=elev_ft,
    )
