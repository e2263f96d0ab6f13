# nameplate_dashboard/editor/store.py
"""
Editor state: an ordered list of nameplate drafts plus the active one.

Every operation is a pure function taking an ``EditorState`` and returning a
new one. Drafts are frozen, so an operation that touches one draft leaves the
others as the very same objects.
"""
from dataclasses import dataclass, field, replace
from typing import Optional, Tuple
from uuid import uuid4

from nameplate_dashboard.db.enums import Theme
from nameplate_dashboard.editor.templates import (
    DEFAULT_ADDRESS_SIZE,
    DEFAULT_HOUSE_NAME_SIZE,
    DEFAULT_OWNER_NAME_SIZE,
    DEFAULT_TEXT_COLOR,
    default_background,
)

LAST_DRAFT_MESSAGE = "At least one nameplate is required!"
COPY_SUFFIX = " (Copy)"

# fields a new draft inherits from the active one
INHERITED_FIELDS = ("rmo", "officer", "lot", "officer_name", "email", "mobile_number", "designation")


class EditorError(ValueError):
    """An editor operation was refused; the state is unchanged."""


def _new_id() -> str:
    return uuid4().hex


@dataclass(frozen=True)
class Draft:
    id: str = field(default_factory=_new_id)
    theme: str = Theme.ambuja.value
    background: str = field(default_factory=lambda: default_background(Theme.ambuja.value))
    house_name: str = "New House"
    owner_name: str = "Owner Name"
    spouse_name: str = ""
    address: str = "Address Here"
    house_name_color: str = DEFAULT_TEXT_COLOR
    house_name_size: int = DEFAULT_HOUSE_NAME_SIZE
    owner_name_color: str = DEFAULT_TEXT_COLOR
    owner_name_size: int = DEFAULT_OWNER_NAME_SIZE
    address_color: str = DEFAULT_TEXT_COLOR
    address_size: int = DEFAULT_ADDRESS_SIZE
    # submitting officer, filled from the logged-in account
    rmo: str = ""
    officer: str = ""
    lot: str = ""
    officer_name: str = ""
    email: str = ""
    mobile_number: str = ""
    designation: str = ""

    def to_payload(self, image_url: str) -> dict:
        """createNameplate body for this draft."""
        return {
            "theme": self.theme,
            "background": self.background,
            "houseName": self.house_name,
            "ownerName": self.owner_name,
            "spouseName": self.spouse_name,
            "address": self.address,
            "textColor": self.owner_name_color,
            "houseNameColor": self.house_name_color,
            "houseNameSize": self.house_name_size,
            "ownerNameColor": self.owner_name_color,
            "ownerNameSize": self.owner_name_size,
            "addressColor": self.address_color,
            "addressSize": self.address_size,
            "rmo": self.rmo,
            "officer": self.officer,
            "lot": self.lot,
            "officer_name": self.officer_name,
            "email": self.email,
            "mobile_number": self.mobile_number,
            "designation": self.designation or self.officer_name,
            "image_url": image_url,
        }


@dataclass(frozen=True)
class EditorState:
    drafts: Tuple[Draft, ...]
    active_id: Optional[str] = None

    @property
    def active(self) -> Optional[Draft]:
        for draft in self.drafts:
            if draft.id == self.active_id:
                return draft
        return self.drafts[0] if self.drafts else None

    def find(self, draft_id: str) -> Optional[Draft]:
        return next((d for d in self.drafts if d.id == draft_id), None)


def initial_state(**account) -> EditorState:
    """One default draft carrying the officer's details (rmo, officer, lot, ...)."""
    unknown = set(account) - set(INHERITED_FIELDS)
    if unknown:
        raise TypeError(f"Unexpected draft fields: {sorted(unknown)}")
    draft = Draft(**{k: v or "" for k, v in account.items()})
    return EditorState(drafts=(draft,), active_id=draft.id)


def add(state: EditorState) -> EditorState:
    active = state.active
    theme = active.theme if active else Theme.ambuja.value
    inherited = {name: getattr(active, name) for name in INHERITED_FIELDS} if active else {}
    draft = Draft(theme=theme, background=default_background(theme), **inherited)
    return EditorState(drafts=state.drafts + (draft,), active_id=draft.id)


def update(state: EditorState, **fields) -> EditorState:
    """Shallow-merge ``fields`` into the active draft only."""
    active = state.active
    if active is None:
        return state
    if "id" in fields:
        raise EditorError("Draft id cannot be changed")
    updated = replace(active, **fields)
    drafts = tuple(updated if d is active else d for d in state.drafts)
    return EditorState(drafts=drafts, active_id=updated.id)


def change_theme(state: EditorState, theme: str) -> EditorState:
    """Switch theme and reset the background to the theme's first template."""
    return update(state, theme=Theme(theme).value, background=default_background(theme))


def delete(state: EditorState, draft_id: str) -> EditorState:
    if len(state.drafts) <= 1:
        raise EditorError(LAST_DRAFT_MESSAGE)
    remaining = tuple(d for d in state.drafts if d.id != draft_id)
    if len(remaining) == len(state.drafts):
        return state
    active_id = state.active_id
    if draft_id == active_id:
        active_id = remaining[0].id if remaining else None
    return EditorState(drafts=remaining, active_id=active_id)


def duplicate(state: EditorState, draft_id: str) -> EditorState:
    original = state.find(draft_id)
    if original is None:
        return state
    copy = replace(
        original,
        id=_new_id(),
        house_name=original.house_name + COPY_SUFFIX,
        officer_name=original.officer_name + COPY_SUFFIX,
    )
    return EditorState(drafts=state.drafts + (copy,), active_id=copy.id)


def select(state: EditorState, draft_id: str) -> EditorState:
    if state.find(draft_id) is None:
        raise EditorError(f"Unknown draft: {draft_id}")
    return EditorState(drafts=state.drafts, active_id=draft_id)
