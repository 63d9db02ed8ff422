"""Where cross-tab figures are written on disk."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True)
class PlotSaveDestinations:
    """Resolved output files for a single figure."""

    directory: Path
    slug: str
    save_static: bool
    save_html: bool

    def ensure_dir(self) -> None:
        self.directory.mkdir(parents=True, exist_ok=True)

    @property
    def png_path(self) -> Path:
        return self.directory / f"{self.slug}.png"

    @property
    def html_path(self) -> Path:
        return self.directory / f"{self.slug}.html"


@dataclass(frozen=True)
class PlotSaveConfig:
    """Run-level settings; every figure of a run lands in `<base_dir>/<run_tag>/`."""

    base_dir: Path
    run_tag: str
    save_static: bool = True
    save_html: bool = True

    def __post_init__(self) -> None:
        if not self.run_tag or "/" in self.run_tag:
            raise ValueError("Run tag must be a non-empty folder name.")
        if not (self.save_static or self.save_html):
            raise ValueError("Enable at least one of PNG or HTML output.")

    @property
    def run_dir(self) -> Path:
        return self.base_dir / self.run_tag

    def for_plot(self, slug: str) -> PlotSaveDestinations:
        return PlotSaveDestinations(
            directory=self.run_dir,
            slug=slug,
            save_static=self.save_static,
            save_html=self.save_html,
        )


__all__ = ["PlotSaveConfig", "PlotSaveDestinations"]
