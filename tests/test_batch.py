from pathlib import Path

import pytest

from svgpalette import batch
from svgpalette.batch import BatchReport, discover_sources, run_batch
from svgpalette.config import Settings
from svgpalette.raster import Capability, CapabilityState

from fakes import ICON


def populate(directory: Path, names: list[str]) -> None:
    for name in names:
        (directory / name).write_text(ICON, encoding="utf-8")


def test_discover_only_top_level_svg_files(tmp_path: Path):
    populate(tmp_path, ["a.svg", "b.svg", "notes.txt", "c.svg.bak"])
    (tmp_path / "dir.svg").mkdir()
    sub = tmp_path / "sub"
    sub.mkdir()
    populate(sub, ["deep.svg"])

    found = discover_sources(tmp_path, ".svg")
    assert sorted(p.name for p in found) == ["a.svg", "b.svg"]


@pytest.mark.asyncio
async def test_batch_three_files_working_rasterizer(tmp_path: Path, png_backend):
    populate(tmp_path, ["home.svg", "user.svg", "gear.svg"])
    cap = Capability(CapabilityState.AVAILABLE, png_backend)
    report = await run_batch(tmp_path, Settings(), capability=cap)

    assert report.discovered == 3
    assert report.successes == 6
    assert report.failures == 0
    assert not report.degraded
    for stem in ("home", "user", "gear"):
        assert (tmp_path / f"{stem}.png").exists()
        assert (tmp_path / f"{stem}-active.png").exists()


@pytest.mark.asyncio
async def test_batch_unreadable_file_counts_two_failures(tmp_path: Path, png_backend):
    (tmp_path / "broken.svg").write_bytes(b"\xff\xfe\x00<svg")
    cap = Capability(CapabilityState.AVAILABLE, png_backend)
    report = await run_batch(tmp_path, Settings(), capability=cap)

    assert report.discovered == 1
    assert report.successes == 0
    assert report.failures == 2
    assert report.files[0].error


@pytest.mark.asyncio
async def test_batch_degraded_mode_writes_fallbacks(tmp_path: Path):
    populate(tmp_path, ["home.svg"])
    cap = Capability(CapabilityState.UNAVAILABLE)
    s = Settings()
    report = await run_batch(tmp_path, s, capability=cap)

    assert report.degraded
    assert report.successes == 2
    assert report.failures == 0
    assert (tmp_path / "home_temp.svg").exists()
    assert (tmp_path / "home-active_temp.svg").exists()
    text = "\n".join(report.summary_lines(s))
    assert "Note:" in text
    assert "_temp.svg" in text


@pytest.mark.asyncio
async def test_batch_ensures_rasterizer_when_not_given(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path, png_backend
):
    populate(tmp_path, ["home.svg"])
    seen: list[Settings] = []

    async def fake_ensure(settings: Settings) -> Capability:
        seen.append(settings)
        return Capability(CapabilityState.INSTALLED, png_backend, detail="local install")

    monkeypatch.setattr(batch, "ensure_rasterizer", fake_ensure)
    report = await run_batch(tmp_path, Settings())
    assert len(seen) == 1
    assert report.capability.state is CapabilityState.INSTALLED
    assert report.successes == 2


@pytest.mark.asyncio
async def test_batch_empty_directory(tmp_path: Path, png_backend):
    cap = Capability(CapabilityState.AVAILABLE, png_backend)
    report = await run_batch(tmp_path, Settings(), capability=cap)
    assert (report.discovered, report.successes, report.failures) == (0, 0, 0)
    assert png_backend.calls == []


def test_summary_lines_totals(png_backend):
    report = BatchReport(
        capability=Capability(CapabilityState.AVAILABLE, png_backend),
        discovered=3,
        successes=5,
        failures=1,
    )
    lines = report.summary_lines(Settings())
    assert "Total .svg files: 3" in lines
    assert "Converted: 5 .png files" in lines
    assert "Failed: 1 files" in lines
    assert not any(line.startswith("Note:") for line in lines)


@pytest.mark.asyncio
async def test_batch_dangling_symlink_counts_two_failures(tmp_path: Path, png_backend):
    (tmp_path / "gone.svg").symlink_to(tmp_path / "nowhere.svg")
    populate(tmp_path, ["home.svg"])
    assert sorted(p.name for p in discover_sources(tmp_path, ".svg")) == ["gone.svg", "home.svg"]

    cap = Capability(CapabilityState.AVAILABLE, png_backend)
    report = await run_batch(tmp_path, Settings(), capability=cap)
    assert report.discovered == 2
    assert report.successes == 2
    assert report.failures == 2
    failed = [f for f in report.files if f.error]
    assert [f.source.name for f in failed] == ["gone.svg"]
