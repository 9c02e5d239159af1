"""
Mechanic taxonomy and event model tests.
"""

import dataclasses
import json

import pytest

from glitched_sense.events import (
    AppBackgrounded,
    ClipboardImageDetected,
    ClipboardUpdated,
    EventKind,
    HudDragCompleted,
    InputEvent,
    JumpPressed,
    MicLevelChanged,
    MoveDirection,
    MultiTouch,
    NotificationTapped,
    ShakeDetected,
    event_class,
    event_from_dict,
    events_for,
)
from glitched_sense.mechanics import Mechanic, MechanicGroup, mechanics_in, parse_mechanics


# =============================================================================
# Mechanics
# =============================================================================

class TestMechanics:
    """Test the closed mechanic set."""

    def test_closed_set(self):
        """Test the taxonomy has exactly the 35 known capabilities."""
        assert len(Mechanic) == 35
        assert Mechanic("drag_hud") is Mechanic.DRAG_HUD
        assert Mechanic("multi_touch") is Mechanic.MULTI_TOUCH

    def test_every_mechanic_has_a_group(self):
        grouped = set()
        for group in MechanicGroup:
            grouped |= mechanics_in(group)
        assert grouped == set(Mechanic)

    def test_group_accessor(self):
        assert Mechanic.SHAKE.group is MechanicGroup.HARDWARE_AWAKENING
        assert Mechanic.AIRDROP.group is MechanicGroup.REALITY_BREAK
        assert Mechanic.GYRO_SHADOW.group is MechanicGroup.UTILITY

    def test_parse_values_and_names(self):
        parsed = parse_mechanics(["shake", "DARK_MODE", " face_id ", ""])
        assert parsed == frozenset({Mechanic.SHAKE, Mechanic.DARK_MODE, Mechanic.FACE_ID})

    def test_parse_unknown_names_it(self):
        with pytest.raises(ValueError, match="telekinesis"):
            parse_mechanics(["shake", "telekinesis"])


# =============================================================================
# Events
# =============================================================================

class TestEvents:
    """Test event tags, attribution and serialization."""

    def test_kind_and_mechanic(self):
        event = MicLevelChanged(power=0.42)
        assert event.kind is EventKind.MIC_LEVEL_CHANGED
        assert event.mechanic is Mechanic.MICROPHONE
        assert event.power == 0.42

    def test_standard_inputs_have_no_mechanic(self):
        assert JumpPressed.mechanic is None
        assert MoveDirection(dx=-1.0).mechanic is None

    def test_events_are_immutable(self):
        event = AppBackgrounded(delta_time=3.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            event.delta_time = 4.0

    def test_value_equality(self):
        """A hardware shake and a button shake are the same value."""
        assert ShakeDetected() == ShakeDetected()
        assert NotificationTapped("a", True) != NotificationTapped("a", False)

    def test_every_kind_has_a_class(self):
        for kind in EventKind:
            cls = event_class(kind)
            assert issubclass(cls, InputEvent)
            assert cls.kind is kind

    def test_to_dict(self):
        assert ClipboardUpdated(value="hunter2").to_dict() == {
            "kind": "clipboard_updated",
            "value": "hunter2",
        }
        assert ShakeDetected().to_dict() == {"kind": "shake_detected"}

    def test_from_dict_after_json(self):
        """Test JSON lists come back as tuples so events compare equal."""
        original = MultiTouch(count=2, locations=((1.0, 2.0), (3.0, 4.0)))
        restored = event_from_dict(json.loads(json.dumps(original.to_dict())))
        assert restored == original

        drag = HudDragCompleted(element_id="battery", screen_position=(10.0, 20.0))
        assert event_from_dict(json.loads(json.dumps(drag.to_dict()))) == drag

    def test_events_for_mechanic(self):
        classes = events_for(Mechanic.CLIPBOARD)
        assert set(classes) == {ClipboardUpdated, ClipboardImageDetected}
