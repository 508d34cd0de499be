from __future__ import annotations

import json
import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Any


class CatalogError(ValueError):
    """Raised when the aircraft catalog cannot be read or is unusable."""


@dataclass(frozen=True, slots=True)
class Aircraft:
    manufacturer: str
    model: str
    version: str
    image: str
    attribution: str | None = None

    @property
    def identity(self) -> tuple[str, str, str]:
        return (self.manufacturer, self.model, self.version)

    @property
    def display_name(self) -> str:
        return f"{self.manufacturer} {self.model} {self.version}"

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "manufacturer": self.manufacturer,
            "model": self.model,
            "version": self.version,
            "image": self.image,
        }
        if self.attribution is not None:
            data["attribution"] = self.attribution
        return data

    @classmethod
    def from_dict(cls, data: object) -> "Aircraft":
        if not isinstance(data, dict):
            raise CatalogError(f"catalog entry must be an object, got {type(data).__name__}")
        fields: dict[str, str] = {}
        for key in ("manufacturer", "model", "version", "image"):
            value = data.get(key)
            if not isinstance(value, str) or value.strip() == "":
                raise CatalogError(f"catalog entry is missing {key!r}: {data!r}")
            fields[key] = value
        attribution = data.get("attribution")
        return cls(
            manufacturer=fields["manufacturer"],
            model=fields["model"],
            version=fields["version"],
            image=fields["image"],
            attribution=str(attribution) if attribution is not None else None,
        )


Catalog = Sequence[Aircraft]


def parse_catalog(payload: object) -> tuple[Aircraft, ...]:
    if not isinstance(payload, list):
        raise CatalogError("catalog must be a JSON array of aircraft objects")
    return tuple(Aircraft.from_dict(item) for item in payload)


def load_catalog(path: Path) -> tuple[Aircraft, ...]:
    """Read the catalog JSON file. An empty catalog is an error."""

    try:
        payload = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise CatalogError(f"failed to read catalog {path}: {exc}") from exc
    catalog = parse_catalog(payload)
    if not catalog:
        raise CatalogError(f"catalog {path} is empty")
    return catalog


def write_catalog(path: Path, catalog: Iterable[Aircraft]) -> None:
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.tmp")
    tmp_path.write_text(
        json.dumps([a.to_dict() for a in catalog], indent=2, ensure_ascii=False),
        encoding="utf-8",
    )
    tmp_path.replace(path)


def merge_catalogs(existing: Iterable[Aircraft], additions: Iterable[Aircraft]) -> list[Aircraft]:
    """Prior entries first, then additions whose identity is not yet present."""

    merged = list(existing)
    seen = {a.identity for a in merged}
    for aircraft in additions:
        if aircraft.identity in seen:
            continue
        seen.add(aircraft.identity)
        merged.append(aircraft)
    return merged


_SPACES_RE = re.compile(r"\s+")
_SPACES_OR_SLASHES_RE = re.compile(r"[\s/]+")


def image_filename(manufacturer: str, model: str, version: str) -> str:
    mfr = _SPACES_RE.sub("_", manufacturer.lower())
    mdl = _SPACES_OR_SLASHES_RE.sub("_", model.lower())
    ver = _SPACES_RE.sub("_", version.lower())
    return f"{mfr}_{mdl}_{ver}.jpg"


# Cascading selector queries: each dropdown is a projection of the catalog.


def manufacturers(catalog: Catalog) -> list[str]:
    return sorted({a.manufacturer for a in catalog})


def models_for(catalog: Catalog, manufacturer: str) -> list[str]:
    if not manufacturer:
        return []
    return sorted({a.model for a in catalog if a.manufacturer == manufacturer})


def versions_for(catalog: Catalog, manufacturer: str, model: str) -> list[str]:
    if not manufacturer or not model:
        return []
    return sorted(
        {a.version for a in catalog if a.manufacturer == manufacturer and a.model == model}
    )
