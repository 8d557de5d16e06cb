import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from config import settings

PathLike = Union[str, Path]


class DatasetError(ValueError):
    """The dataset file is missing or not shaped like {"items": [...]}."""


def load_dataset(path: PathLike) -> List[Dict[str, Any]]:
    """
    Read a dataset file and return its "items" list.

    Expected format (public/data.json):

      {
        "items": [
          {"id": "Y47", "name": "Oakland Southwest", "latitude": 42.5,
           "longitude": -83.6, "courtesy_car": true, ...},
          ...
        ]
      }

    Raises DatasetError for anything else.
    """
    path = Path(path)
    if not path.exists():
        raise DatasetError(f"{path} not found")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as e:
        raise DatasetError(f"{path} is not valid JSON: {e}") from e

    if not isinstance(data, dict):
        raise DatasetError(f"{path}: expected an object with an 'items' field")

    items = data.get("items")
    if not isinstance(items, list):
        raise DatasetError(f"{path}: 'items' field missing or not a list")

    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise DatasetError(f"{path}: item {index} is not an object")

    return items


def write_dataset(path: PathLike, items: List[Dict[str, Any]]) -> None:
    path = Path(path)
    path.write_text(
        json.dumps({"items": items}, ensure_ascii=False, indent=2),
        encoding="utf-8",
    )


def backup_path_for(path: PathLike) -> Path:
    path = Path(path)
    return path.with_name(path.name + settings.backup_suffix)


def backup_dataset(path: PathLike, backup_path: Optional[PathLike] = None) -> Path:
    """Byte-for-byte copy of `path`, next to it unless told otherwise."""
    path = Path(path)
    target = Path(backup_path) if backup_path else backup_path_for(path)
    target.write_bytes(path.read_bytes())
    return target
