"""Unit tests for session data models."""

import dataclasses
import pytest
from datetime import datetime, timedelta, timezone

from manas360.models import (
    GroupSession,
    GroupTheme,
    IndividualSession,
    SessionKind,
    SessionStatus,
    VRAccessTier,
    VREnvironment,
    VRSession,
)

START = datetime(2025, 3, 14, 18, 0, tzinfo=timezone.utc)
THEME = GroupTheme(id="theme-1", slug="student-stress", name="Student Stress Circle", emoji="📚")
FOREST = VREnvironment(id="therapy_forest", name="Therapy Forest", icon="🌲",
                       thumbnail="forest.png", therapy_type="Grounding",
                       target_conditions=("anxiety",))


def make_group(current=1, maximum=15, start=START):
    return GroupSession(id="g-1", therapist_name="Dr. Emily Chen", start_time=start,
                        duration_minutes=60, theme=THEME,
                        current_participants=current, max_participants=maximum)


@pytest.mark.unit
class TestSessionVariants:

    def test_discriminant_and_flags(self):
        individual = IndividualSession(id="i-1", therapist_name="Dr. Emily Chen", start_time=START,
                                       duration_minutes=45, patient_name="Sarah Johnson")
        vr = VRSession(id="v-1", therapist_name="Dr. Emily Chen", start_time=START,
                       duration_minutes=45, patient_name="Sarah Johnson", vr_environment=FOREST)
        group = make_group()

        assert individual.kind is SessionKind.INDIVIDUAL
        assert not individual.is_group and not individual.is_vr
        assert group.kind is SessionKind.GROUP and group.is_group and not group.is_vr
        assert vr.kind is SessionKind.VR and vr.is_vr and not vr.is_group

    def test_defaults(self):
        session = IndividualSession(id="i-1", therapist_name="Dr. Emily Chen", start_time=START,
                                    duration_minutes=45, patient_name="Sarah Johnson")
        assert session.status is SessionStatus.SCHEDULED
        assert session.is_encrypted is True
        assert session.notes is None
        assert session.end_time == START + timedelta(minutes=45)

    def test_encryption_cannot_be_disabled(self):
        with pytest.raises(TypeError):
            IndividualSession(id="i-1", therapist_name="Dr. Emily Chen", start_time=START,
                              duration_minutes=45, patient_name="Sarah Johnson", is_encrypted=False)

    def test_replace_keeps_encryption(self):
        vr = VRSession(id="v-1", therapist_name="Dr. Emily Chen", start_time=START,
                       duration_minutes=45, patient_name="Sarah Johnson", vr_environment=FOREST)
        launched = dataclasses.replace(vr, vr_tier=VRAccessTier.PREMIUM)
        assert launched.vr_tier is VRAccessTier.PREMIUM
        assert launched.is_encrypted is True
        assert vr.vr_tier is None

    def test_sessions_are_immutable(self):
        group = make_group()
        with pytest.raises(dataclasses.FrozenInstanceError):
            group.current_participants = 3

    @pytest.mark.parametrize("duration", [0, -15])
    def test_rejects_non_positive_duration(self, duration):
        with pytest.raises(ValueError):
            IndividualSession(id="i-1", therapist_name="Dr. Emily Chen", start_time=START,
                              duration_minutes=duration, patient_name="Sarah Johnson")

    def test_rejects_naive_start_time(self):
        with pytest.raises(ValueError):
            IndividualSession(id="i-1", therapist_name="Dr. Emily Chen",
                              start_time=datetime(2025, 3, 14, 18, 0),
                              duration_minutes=45, patient_name="Sarah Johnson")


@pytest.mark.unit
class TestGroupCapacity:

    def test_rejects_over_capacity(self):
        with pytest.raises(ValueError):
            make_group(current=16, maximum=15)

    def test_rejects_negative_participants(self):
        with pytest.raises(ValueError):
            make_group(current=-1)

    def test_spots_left_and_critical(self):
        assert make_group(current=11).spots_left == 4
        assert not make_group(current=11).is_critical
        assert make_group(current=12).is_critical
        assert make_group(current=15).spots_left == 0

    def test_is_imminent(self):
        group = make_group()
        assert not group.is_imminent(START - timedelta(seconds=60))
        assert group.is_imminent(START - timedelta(seconds=59))
        assert group.is_imminent(START + timedelta(minutes=5))
