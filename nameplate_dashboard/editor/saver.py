# nameplate_dashboard/editor/saver.py
"""
Save pipeline for editor drafts.

One draft: validate -> rasterize -> upload image -> create the record.
Outcomes:
- ``invalid``: local validation failed, nothing was sent
- ``failed``: rendering or upload failed, nothing was stored
- ``partial``: the image was uploaded but the record was not created
- ``saved``: image and record both stored
"""
import time
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Tuple

import httpx

from nameplate_dashboard.editor.client import ApiError, NameplateApiClient
from nameplate_dashboard.editor.renderer import BackgroundLoader, render_draft
from nameplate_dashboard.editor.store import Draft, EditorState, select
from nameplate_dashboard.logger import get_logger
from nameplate_dashboard.validation import check_draft

logger = get_logger(__name__)

SETTLE_DELAY = 0.3

SAVED = "saved"
PARTIAL = "partial"
FAILED = "failed"
INVALID = "invalid"


@dataclass
class SaveResult:
    draft_id: str
    label: str
    outcome: str
    url: Optional[str] = None
    record_id: Optional[str] = None
    errors: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.outcome == SAVED


@dataclass
class BatchSummary:
    results: List[SaveResult]

    def count(self, outcome: str) -> int:
        return sum(1 for r in self.results if r.outcome == outcome)

    def as_dict(self) -> dict:
        return {
            "total": len(self.results),
            SAVED: self.count(SAVED),
            PARTIAL: self.count(PARTIAL),
            FAILED: self.count(FAILED),
            INVALID: self.count(INVALID),
            "results": [
                {"draft": r.label, "outcome": r.outcome, "url": r.url, "errors": r.errors}
                for r in self.results
            ],
        }


def save(
    draft: Draft,
    *,
    client: NameplateApiClient,
    loader: Optional[BackgroundLoader] = None,
    renderer: Callable[..., bytes] = render_draft,
) -> SaveResult:
    """Run the save sequence for one draft. Never raises for API or render failures."""
    label = draft.officer_name or draft.house_name
    errors = check_draft(draft)
    if errors:
        return SaveResult(draft.id, label, INVALID, errors=errors)

    try:
        png = renderer(draft, loader=loader)
        url = client.upload_image(png, identifier=draft.officer_name)
    except (ApiError, httpx.HTTPError, OSError, ValueError) as exc:
        logger.warning(f"upload failed draft={draft.id}: {exc}")
        return SaveResult(draft.id, label, FAILED, errors=[str(exc)])

    try:
        record = client.create_nameplate(draft.officer, draft.lot, draft.to_payload(url))
    except (ApiError, httpx.HTTPError) as exc:
        logger.warning(f"record save failed draft={draft.id} url={url}: {exc}")
        return SaveResult(draft.id, label, PARTIAL, url=url, errors=[str(exc)])

    return SaveResult(draft.id, label, SAVED, url=url, record_id=record.get("id"))


def save_all(
    state: EditorState,
    *,
    client: NameplateApiClient,
    loader: Optional[BackgroundLoader] = None,
    settle_delay: float = SETTLE_DELAY,
    sleep: Callable[[float], None] = time.sleep,
    renderer: Callable[..., bytes] = render_draft,
) -> Tuple[EditorState, BatchSummary]:
    """
    Save every draft in order. A failure is recorded and the batch moves on;
    nothing is retried. Returns the final state (last draft active) and the
    summary.
    """
    results = []
    for draft in state.drafts:
        state = select(state, draft.id)
        if settle_delay:
            sleep(settle_delay)
        result = save(state.active, client=client, loader=loader, renderer=renderer)
        logger.info(f"save_all draft={draft.id} outcome={result.outcome}")
        results.append(result)
    return state, BatchSummary(results)
