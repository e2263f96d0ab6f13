# nameplate_dashboard/tests/test_editor_store.py
import pytest

from nameplate_dashboard.editor import store
from nameplate_dashboard.editor.store import EditorError, LAST_DRAFT_MESSAGE
from nameplate_dashboard.editor.templates import COLOR_PRESETS, TEMPLATES


def _state():
    return store.initial_state(
        rmo="RMO1", officer="OFF11", lot="LOT-1",
        officer_name="Officer One", email="off@example.com", mobile_number="9876543210",
    )


def test_initial_state_has_one_active_draft():
    state = _state()
    assert len(state.drafts) == 1
    assert state.active.id == state.active_id
    assert state.active.background == TEMPLATES["ambuja"][0]


def test_add_copies_account_fields_and_uses_defaults():
    state = store.change_theme(_state(), "acc")
    state = store.add(state)

    new = state.active
    assert len(state.drafts) == 2
    assert new.theme == "acc"
    assert new.background == "/backgrounds/acc/d1.webp"
    assert (new.house_name, new.owner_name, new.address) == ("New House", "Owner Name", "Address Here")
    assert new.house_name_color == "#FFD700"
    assert (new.house_name_size, new.owner_name_size, new.address_size) == (18, 40, 18)
    assert (new.rmo, new.officer, new.lot, new.email) == ("RMO1", "OFF11", "LOT-1", "off@example.com")


def test_update_only_touches_active_draft():
    state = store.add(_state())
    first, second = state.drafts

    state = store.update(state, house_name="Green Acres")

    assert state.drafts[0] is first
    assert state.drafts[1].house_name == "Green Acres"
    assert second.house_name == "New House"


def test_change_theme_resets_background():
    state = store.update(_state(), background="/backgrounds/ambuja/d3.webp")
    state = store.change_theme(state, "acc")
    assert state.active.theme == "acc"
    assert state.active.background == "/backgrounds/acc/d1.webp"


def test_change_theme_rejects_unknown_theme():
    with pytest.raises(ValueError):
        store.change_theme(_state(), "marble")


def test_delete_last_draft_is_refused():
    state = _state()
    with pytest.raises(EditorError, match=LAST_DRAFT_MESSAGE):
        store.delete(state, state.active_id)
    assert len(state.drafts) == 1


def test_delete_active_reselects_first_remaining():
    state = store.add(_state())
    first_id = state.drafts[0].id
    state = store.delete(state, state.active_id)
    assert [d.id for d in state.drafts] == [first_id]
    assert state.active_id == first_id


def test_duplicate_appends_copy_suffix_and_activates():
    state = store.update(_state(), house_name="Sunrise")
    source = state.active
    state = store.duplicate(state, source.id)

    copy = state.active
    assert copy.id != source.id
    assert copy.house_name == "Sunrise (Copy)"
    assert copy.officer_name == "Officer One (Copy)"
    assert copy.address == source.address


def test_select_unknown_draft_raises():
    with pytest.raises(EditorError):
        store.select(_state(), "nope")


def test_color_presets():
    assert [color for _, color in COLOR_PRESETS] == ["#FFD700", "rgb(204, 0, 26)", "#FFFFFF", "#000000"]


def test_to_payload_matches_create_body():
    payload = _state().active.to_payload("https://cdn/x.png")
    assert payload["houseName"] == "New House"
    assert payload["mobile_number"] == "9876543210"
    assert payload["image_url"] == "https://cdn/x.png"
    assert payload["designation"] == "Officer One"
