"""Offline catalog builder.

Searches Wikimedia Commons for each scrape target, downloads the first hit and
merges the successful entries into the catalog JSON. Runs one request at a
time with a fixed pause between items; the game never calls this module.

Usage:
  python -m plandl.scraper --catalog planes.json
  python -m plandl.scraper --catalog planes.json --limit 5 -v
"""

from __future__ import annotations

import argparse
import json
import logging
import re
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import requests

from .catalog import Aircraft, image_filename, merge_catalogs, parse_catalog, write_catalog
from .scrape_targets import TARGETS, ScrapeTarget

logger = logging.getLogger(__name__)

COMMONS_API_URL = "https://commons.wikimedia.org/w/api.php"
USER_AGENT = "PlandlGame/1.0"

_TAG_RE = re.compile(r"<[^>]+>")


@dataclass(frozen=True, slots=True)
class ScraperConfig:
    catalog_path: Path = Path("planes.json")
    images_dir: Path | None = None  # defaults to <catalog dir>/images
    max_attempts: int = 3
    backoff_base_s: float = 5.0  # wait 2**attempt * base before attempt + 1
    item_delay_s: float = 6.0
    request_timeout_s: float = 30.0
    thumb_width: int = 1280
    chunk_size: int = 64 * 1024

    def resolved_images_dir(self) -> Path:
        if self.images_dir is not None:
            return self.images_dir
        return self.catalog_path.parent / "images"


class RateLimitedError(RuntimeError):
    """The remote answered HTTP 429."""


@dataclass(frozen=True, slots=True)
class ImageHit:
    url: str
    attribution: str | None = None


@dataclass(slots=True)
class ScrapeReport:
    added: list[Aircraft] = field(default_factory=list)
    already_present: int = 0
    downloaded: int = 0
    not_found: list[ScrapeTarget] = field(default_factory=list)
    failed: list[ScrapeTarget] = field(default_factory=list)


def make_session() -> requests.Session:
    session = requests.Session()
    session.headers.update({"User-Agent": USER_AGENT})
    return session


def _check_status(response: Any) -> None:
    if response.status_code == 429:
        raise RateLimitedError(f"rate limited: {getattr(response, 'url', '')}")
    response.raise_for_status()


def _plain(value: object) -> str:
    return " ".join(_TAG_RE.sub("", str(value)).split())


def _meta_value(meta: dict[str, Any], key: str) -> str:
    entry = meta.get(key)
    if isinstance(entry, dict):
        entry = entry.get("value")
    if not isinstance(entry, str):
        return ""
    return _plain(entry)


def _attribution_from(info: dict[str, Any]) -> str | None:
    meta = info.get("extmetadata")
    if not isinstance(meta, dict):
        return None
    artist = _meta_value(meta, "Artist")
    license_name = _meta_value(meta, "LicenseShortName")
    parts = [p for p in (artist, license_name) if p]
    if not parts:
        return None
    return ", ".join(parts) + " via Wikimedia Commons"


def search_image(session: Any, query: str, *, config: ScraperConfig) -> ImageHit | None:
    """Return the first Commons file matching ``query``, or None."""

    params = {
        "action": "query",
        "format": "json",
        "generator": "search",
        "gsrnamespace": 6,
        "gsrsearch": f"{query} aircraft",
        "gsrlimit": 1,
        "prop": "imageinfo",
        "iiprop": "url|extmetadata",
        "iiurlwidth": config.thumb_width,
    }
    response = session.get(COMMONS_API_URL, params=params, timeout=config.request_timeout_s)
    try:
        _check_status(response)
        payload = response.json()
    finally:
        response.close()

    result = payload.get("query") if isinstance(payload, dict) else None
    pages = result.get("pages") if isinstance(result, dict) else None
    if not isinstance(pages, dict) or not pages:
        return None
    first = next(iter(pages.values()))
    infos = first.get("imageinfo") if isinstance(first, dict) else None
    if not infos:
        return None
    info = infos[0] if isinstance(infos, list) else None
    if not isinstance(info, dict):
        raise ValueError(f"unexpected imageinfo for {query!r}: {infos!r}")
    url = info.get("thumburl") or info.get("url")
    if not url:
        return None
    if not isinstance(url, str):
        raise ValueError(f"unexpected image url for {query!r}: {url!r}")
    return ImageHit(url=url, attribution=_attribution_from(info))


def download_file(session: Any, url: str, path: Path, *, config: ScraperConfig) -> Path:
    """Stream ``url`` to ``path``; a partial file never survives a failure."""

    path.parent.mkdir(parents=True, exist_ok=True)
    tmp_path = path.with_suffix(f"{path.suffix}.part")
    response = session.get(url, stream=True, timeout=config.request_timeout_s)
    try:
        _check_status(response)
        with tmp_path.open("wb") as fh:
            for chunk in response.iter_content(chunk_size=config.chunk_size):
                if chunk:
                    fh.write(chunk)
        tmp_path.replace(path)
    except BaseException:
        tmp_path.unlink(missing_ok=True)
        raise
    finally:
        response.close()
    return path


def fetch_aircraft_image(
    session: Any,
    target: ScrapeTarget,
    path: Path,
    *,
    config: ScraperConfig,
    sleep: Callable[[float], None] = time.sleep,
) -> ImageHit | None:
    """Search and download one image, backing off on HTTP 429.

    Returns None when the search has no usable hit. Raises RateLimitedError once
    the attempts are exhausted. Only 429 is retried; any other error fails the
    item on its first occurrence.
    """

    attempts = max(1, int(config.max_attempts))
    for attempt in range(1, attempts + 1):
        try:
            hit = search_image(session, target.search, config=config)
            if hit is None:
                return None
            download_file(session, hit.url, path, config=config)
            return hit
        except RateLimitedError:
            if attempt >= attempts:
                raise
            backoff_s = (2**attempt) * config.backoff_base_s
            logger.info(
                "Rate limited, waiting %.0fs before retry %d/%d", backoff_s, attempt + 1, attempts
            )
            sleep(backoff_s)
    return None


def _image_ref(path: Path, catalog_path: Path) -> str:
    try:
        return path.relative_to(catalog_path.parent).as_posix()
    except ValueError:
        return path.as_posix()


def scrape(
    targets: Sequence[ScrapeTarget],
    *,
    config: ScraperConfig,
    session: Any,
    sleep: Callable[[float], None] = time.sleep,
) -> ScrapeReport:
    """Process targets in order; one item's failure never stops the batch."""

    report = ScrapeReport()
    images_dir = config.resolved_images_dir()
    total = len(targets)

    for count, target in enumerate(targets, start=1):
        label = f"{target.manufacturer} {target.model} {target.version}"
        logger.info("[%d/%d] Processing: %s", count, total, label)

        filename = image_filename(target.manufacturer, target.model, target.version)
        path = images_dir / filename
        image_ref = _image_ref(path, config.catalog_path)

        # An existing file counts as downloaded; nothing is fetched so no pause either.
        if path.exists():
            logger.info("Already exists: %s", filename)
            report.already_present += 1
            report.added.append(Aircraft(target.manufacturer, target.model, target.version, image_ref))
            continue

        try:
            logger.debug("Searching: %r", target.search)
            hit = fetch_aircraft_image(session, target, path, config=config, sleep=sleep)
        except (requests.RequestException, RateLimitedError, ValueError, KeyError, OSError) as exc:
            logger.warning("Failed %s: %s", label, exc)
            report.failed.append(target)
        else:
            if hit is None:
                logger.info("No image found for %s", label)
                report.not_found.append(target)
            else:
                logger.info("Downloaded: %s", filename)
                report.downloaded += 1
                report.added.append(
                    Aircraft(
                        target.manufacturer,
                        target.model,
                        target.version,
                        image_ref,
                        attribution=hit.attribution,
                    )
                )

        if count < total:
            sleep(config.item_delay_s)

    return report


def read_catalog_or_empty(path: Path) -> list[Aircraft]:
    if not path.exists():
        return []
    return list(parse_catalog(json.loads(path.read_text(encoding="utf-8"))))


def update_catalog(catalog_path: Path, additions: Sequence[Aircraft]) -> list[Aircraft]:
    merged = merge_catalogs(read_catalog_or_empty(catalog_path), additions)
    write_catalog(catalog_path, merged)
    return merged


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="plandl-scrape",
        description="Fetch aircraft images from Wikimedia Commons into the Plandl catalog.",
    )
    parser.add_argument("--catalog", type=Path, default=Path("planes.json"), help="Catalog JSON file")
    parser.add_argument("--images-dir", type=Path, default=None, help="Image directory (default: <catalog dir>/images)")
    parser.add_argument("--delay", type=float, default=6.0, help="Seconds to pause between items")
    parser.add_argument("--limit", type=int, default=None, help="Only process the first N targets")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    config = ScraperConfig(
        catalog_path=args.catalog,
        images_dir=args.images_dir,
        item_delay_s=args.delay,
    )
    targets = TARGETS if args.limit is None else TARGETS[: max(0, args.limit)]
    logger.info("Processing %d aircraft...", len(targets))

    session = make_session()
    try:
        report = scrape(targets, config=config, session=session)
    finally:
        session.close()

    merged = update_catalog(config.catalog_path, report.added)
    logger.info(
        "Completed: %d downloaded, %d already present, %d not found, %d failed",
        report.downloaded,
        report.already_present,
        len(report.not_found),
        len(report.failed),
    )
    logger.info("Total aircraft in catalog: %d", len(merged))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
