"""Progress reporting for the paginated fetchers."""

from __future__ import annotations

from typing import Callable, Optional

ProgressCallback = Callable[[str, int, int], None]


def report_progress(
    progress: Optional[ProgressCallback], stage: str, fetched: int, total: int
) -> None:
    """Invoke ``progress`` if the caller supplied one."""

    if progress is not None:
        progress(stage, fetched, total)


def render_progress_bar(fetched: int, total: int, width: int = 30) -> str:
    """Render a fixed-width text bar such as ``[=====     ] 5/10``."""

    if total <= 0:
        return f"[{'=' * width}] {fetched}"
    fetched = min(max(fetched, 0), total)
    filled = min(int(fetched / total * width), width)
    return f"[{'=' * filled}{' ' * (width - filled)}] {fetched}/{total}"
