import json

import pytest

import airports


def make_airport(id, lat, lon, name=None, **amenities):
    rec = {"id": id, "name": name or f"{id} Field", "latitude": lat, "longitude": lon}
    rec.update(amenities)
    return rec


@pytest.fixture
def sample_items():
    return [
        make_airport("KMSP", 44.8820, -93.2218, "Minneapolis-St Paul Intl", meals=True, elevation=841),
        make_airport("Y47", 42.4986, -83.6233, "Oakland Southwest", courtesy_car=True, bicycles=True),
        make_airport("2Y2", 45.5050, -94.9260, "Belgrade", camping=True, meals=True),
        make_airport("KANE", 45.1450, -93.2114, "Anoka County-Blaine", courtesy_car=True, camping=True, elevation="912"),
    ]


@pytest.fixture
def dataset_file(tmp_path):
    """Write {"items": [...]} to a temp data.json and return its path."""
    def _write(items):
        path = tmp_path / "data.json"
        path.write_text(json.dumps({"items": items}, indent=2), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def loaded_airports(sample_items):
    airports.set_airports(sample_items)
    yield sample_items
    airports.set_airports([])
