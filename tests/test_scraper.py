from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import pytest
import requests

from plandl.catalog import Aircraft, load_catalog, write_catalog
from plandl.scrape_targets import TARGETS, ScrapeTarget
from plandl.scraper import (
    COMMONS_API_URL,
    RateLimitedError,
    ScraperConfig,
    fetch_aircraft_image,
    scrape,
    search_image,
    update_catalog,
)


@dataclass
class FakeResponse:
    status_code: int = 200
    payload: Any = None
    body: bytes = b""
    url: str = ""

    def json(self) -> Any:
        if isinstance(self.payload, Exception):
            raise self.payload
        return self.payload

    def iter_content(self, chunk_size: int = 1024):
        for i in range(0, len(self.body), 4):
            yield self.body[i : i + 4]

    def raise_for_status(self) -> None:
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def close(self) -> None:
        pass


@dataclass
class FakeSession:
    """Replays queued responses: search calls and downloads are separate queues."""

    searches: list[FakeResponse] = field(default_factory=list)
    downloads: list[FakeResponse] = field(default_factory=list)
    calls: list[tuple[str, dict[str, Any] | None]] = field(default_factory=list)

    def get(self, url: str, params: dict[str, Any] | None = None, stream: bool = False, timeout: float | None = None):
        self.calls.append((url, params))
        if url == COMMONS_API_URL:
            return self.searches.pop(0)
        return self.downloads.pop(0)


def _hit(url: str = "https://upload.example/thumb.jpg") -> FakeResponse:
    return FakeResponse(
        payload={
            "query": {
                "pages": {
                    "123": {
                        "title": "File:Plane.jpg",
                        "imageinfo": [
                            {
                                "url": "https://upload.example/full.jpg",
                                "thumburl": url,
                                "extmetadata": {
                                    "Artist": {"value": '<a href="//x">Jane Doe</a>'},
                                    "LicenseShortName": {"value": "CC BY-SA 4.0"},
                                },
                            }
                        ],
                    }
                }
            }
        }
    )


def _miss() -> FakeResponse:
    return FakeResponse(payload={"batchcomplete": ""})


TARGET = ScrapeTarget("Cessna", "310", "Standard", "Cessna 310")


class Sleeps(list):
    def __call__(self, seconds: float) -> None:
        self.append(seconds)


def test_search_builds_commons_query_and_reads_first_hit() -> None:
    session = FakeSession(searches=[_hit()])
    hit = search_image(session, "Cessna 310", config=ScraperConfig())

    assert hit is not None
    assert hit.url == "https://upload.example/thumb.jpg"
    assert hit.attribution == "Jane Doe, CC BY-SA 4.0 via Wikimedia Commons"
    _, params = session.calls[0]
    assert params is not None
    assert params["gsrsearch"] == "Cessna 310 aircraft"
    assert params["gsrnamespace"] == 6
    assert params["gsrlimit"] == 1
    assert params["iiurlwidth"] == 1280


def test_search_without_pages_is_no_image() -> None:
    assert search_image(FakeSession(searches=[_miss()]), "x", config=ScraperConfig()) is None


def _page(info: Any) -> FakeResponse:
    return FakeResponse(payload={"query": {"pages": {"1": {"imageinfo": [info]}}}})


def test_search_reads_plain_string_metadata() -> None:
    page = _page({"url": "https://upload.example/a.jpg", "extmetadata": {"Artist": "Bob", "LicenseShortName": 7}})
    hit = search_image(FakeSession(searches=[page]), "x", config=ScraperConfig())
    assert hit is not None
    assert hit.attribution == "Bob via Wikimedia Commons"


@pytest.mark.parametrize(
    "payload",
    [
        {"query": {"pages": {"1": {"imageinfo": ["File:Plane.jpg"]}}}},
        {"query": {"pages": {"1": {"imageinfo": [{"url": ["nested"]}]}}}},
    ],
)
def test_search_rejects_malformed_imageinfo(payload: Any) -> None:
    with pytest.raises(ValueError):
        search_image(FakeSession(searches=[FakeResponse(payload=payload)]), "x", config=ScraperConfig())


def test_search_with_unexpected_query_shape_is_no_image() -> None:
    session = FakeSession(searches=[FakeResponse(payload={"query": "oops"})])
    assert search_image(session, "x", config=ScraperConfig()) is None


def test_malformed_page_fails_only_its_item(tmp_path: Path) -> None:
    targets = (
        ScrapeTarget("Cessna", "310", "Standard", "Cessna 310"),
        ScrapeTarget("Robinson", "R44", "Raven", "Robinson R44"),
    )
    session = FakeSession(
        searches=[_page("not a dict"), _hit()],
        downloads=[FakeResponse(body=b"R44")],
    )
    config = ScraperConfig(catalog_path=tmp_path / "planes.json")

    report = scrape(targets, config=config, session=session, sleep=Sleeps())

    assert report.failed == [targets[0]]
    assert [a.identity for a in report.added] == [("Robinson", "R44", "Raven")]


def test_rate_limit_backs_off_then_succeeds(tmp_path: Path) -> None:
    session = FakeSession(
        searches=[FakeResponse(status_code=429), FakeResponse(status_code=429), _hit()],
        downloads=[FakeResponse(body=b"JPEGDATA")],
    )
    sleeps = Sleeps()
    path = tmp_path / "images" / "cessna_310_standard.jpg"

    hit = fetch_aircraft_image(session, TARGET, path, config=ScraperConfig(), sleep=sleeps)

    assert hit is not None
    assert sleeps == [10.0, 20.0]
    assert path.read_bytes() == b"JPEGDATA"


def test_rate_limit_exhausts_after_three_attempts(tmp_path: Path) -> None:
    session = FakeSession(searches=[FakeResponse(status_code=429) for _ in range(3)])
    sleeps = Sleeps()
    with pytest.raises(RateLimitedError):
        fetch_aircraft_image(session, TARGET, tmp_path / "x.jpg", config=ScraperConfig(), sleep=sleeps)
    assert len(session.calls) == 3
    assert sleeps == [10.0, 20.0]


def test_failed_download_leaves_no_file(tmp_path: Path) -> None:
    session = FakeSession(searches=[_hit()], downloads=[FakeResponse(status_code=404)])
    path = tmp_path / "x.jpg"
    with pytest.raises(requests.HTTPError):
        fetch_aircraft_image(session, TARGET, path, config=ScraperConfig(), sleep=Sleeps())
    assert not path.exists()
    assert not path.with_suffix(".jpg.part").exists()


def test_batch_continues_past_failures_and_paces_items(tmp_path: Path) -> None:
    catalog_path = tmp_path / "planes.json"
    images = tmp_path / "images"
    images.mkdir()
    (images / "piper_j-3_cub.jpg").write_bytes(b"old")

    targets = (
        ScrapeTarget("Cessna", "310", "Standard", "Cessna 310"),  # network error
        ScrapeTarget("Piper", "J-3", "Cub", "Piper J-3 Cub"),  # already on disk
        ScrapeTarget("Cessna", "337", "Skymaster", "Cessna 337"),  # no result
        ScrapeTarget("Robinson", "R44", "Raven", "Robinson R44"),  # downloaded
    )
    session = FakeSession(
        searches=[FakeResponse(payload=ValueError("bad json")), _miss(), _hit()],
        downloads=[FakeResponse(body=b"R44")],
    )
    sleeps = Sleeps()

    report = scrape(targets, config=ScraperConfig(catalog_path=catalog_path), session=session, sleep=sleeps)

    assert report.failed == [targets[0]]
    assert report.not_found == [targets[2]]
    assert report.already_present == 1
    assert report.downloaded == 1
    assert [a.identity for a in report.added] == [("Piper", "J-3", "Cub"), ("Robinson", "R44", "Raven")]
    assert report.added[1].image == "images/robinson_r44_raven.jpg"
    assert report.added[1].attribution == "Jane Doe, CC BY-SA 4.0 via Wikimedia Commons"
    # Paced after each fetched item except the last; the on-disk skip is free.
    assert sleeps == [6.0, 6.0]
    assert (images / "robinson_r44_raven.jpg").read_bytes() == b"R44"


def test_update_catalog_merges_with_existing_file(tmp_path: Path) -> None:
    path = tmp_path / "planes.json"
    prior = [Aircraft("Cessna", "172", "Skyhawk", "images/cessna_172_skyhawk.jpg", "Somebody")]
    write_catalog(path, prior)

    merged = update_catalog(
        path,
        [
            Aircraft("Cessna", "172", "Skyhawk", "images/dup.jpg"),
            Aircraft("Bell", "206", "JetRanger", "images/bell_206_jetranger.jpg"),
        ],
    )

    assert [a.identity for a in merged] == [("Cessna", "172", "Skyhawk"), ("Bell", "206", "JetRanger")]
    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk[0]["attribution"] == "Somebody"
    assert list(load_catalog(path)) == merged


def test_update_catalog_creates_missing_file(tmp_path: Path) -> None:
    path = tmp_path / "planes.json"
    merged = update_catalog(path, [Aircraft("Bell", "206", "JetRanger", "images/b.jpg")])
    assert len(merged) == 1
    assert path.exists()


def test_target_list_has_unique_identities() -> None:
    identities = [(t.manufacturer, t.model, t.version) for t in TARGETS]
    assert len(identities) == len(set(identities))
    assert all(t.search for t in TARGETS)
