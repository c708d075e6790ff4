"""Tests for the set intensity resolver, density factor and energy split."""

from __future__ import annotations

import pytest

from prgrm.schemas import SetPrescription
from prgrm.services.energy import energy_mix_for_set
from prgrm.services.intensity import (
    density_factor,
    effective_rest,
    intensity_factor,
    resolve_intensity,
    rpe_factor,
    set_raw_load,
)


def test_percent_1rm_mapping():
    assert intensity_factor(SetPrescription(reps=5, one_rep_max_percent=60)) == 0.5
    assert intensity_factor(SetPrescription(reps=5, one_rep_max_percent=90)) == 1.0
    assert intensity_factor(SetPrescription(reps=5, one_rep_max_percent=120)) == 1.0
    assert intensity_factor(SetPrescription(reps=5, one_rep_max_percent=75)) == pytest.approx(0.75)


def test_rpe_mapping():
    assert rpe_factor(6) == pytest.approx(0.65)
    assert rpe_factor(9.5) == pytest.approx(1.0)
    assert rpe_factor(10) == 1.0
    assert rpe_factor(3) == 0.65
    assert rpe_factor(8) == pytest.approx(0.85)


def test_default_intensity_when_missing():
    assert intensity_factor(SetPrescription(reps=8)) == 0.75


def test_precedence_percent_over_rpe_over_rir():
    s = SetPrescription(reps=5, one_rep_max_percent=90, rpe=6, rir=4)
    assert resolve_intensity(s).source == "percent_1rm"
    s = SetPrescription(reps=5, rpe=6, rir=0)
    assert resolve_intensity(s).source == "rpe"
    s = SetPrescription(reps=5, rir=2)
    resolved = resolve_intensity(s)
    assert resolved.source == "rir"
    assert resolved.value == 8.0
    assert intensity_factor(s) == pytest.approx(0.85)


def test_density_by_rest():
    assert density_factor(SetPrescription(reps=5, rest=45)) == 1.15
    assert density_factor(SetPrescription(reps=5, rest=90)) == 1.05
    assert density_factor(SetPrescription(reps=5, rest=150)) == 1.0
    assert density_factor(SetPrescription(reps=5, rest=240)) == 0.95


def test_density_bumps():
    s = SetPrescription(reps=10, rest=90, set_type="amrap")
    assert density_factor(s) == pytest.approx(1.05 * 1.08)
    assert density_factor(s, "short_rests") == pytest.approx(1.05 * 1.05 * 1.08)
    assert density_factor(SetPrescription(reps=10, rest=150, set_type="myo_reps")) == pytest.approx(1.06)


def test_missing_rest_defaults_to_two_minutes():
    s = SetPrescription(reps=10)
    assert effective_rest(s) == 120.0
    assert density_factor(s) == 1.0


def test_set_raw_load():
    s = SetPrescription(reps=10, rpe=8, rest=90)
    assert set_raw_load(s) == pytest.approx(10 * 0.85 * 1.05)
    assert set_raw_load(SetPrescription(reps=0, rpe=8)) == 0.0


def test_energy_mix_sums_to_one():
    for reps, rest in [(2, 180), (5, 120), (10, 90), (20, 45), (1, 30)]:
        mix = energy_mix_for_set(SetPrescription(reps=reps, rest=rest))
        assert sum(mix.values()) == pytest.approx(1.0)


def test_energy_mix_heavy_low_rep_is_atp_dominant():
    mix = energy_mix_for_set(SetPrescription(reps=3, rest=180))
    assert mix["ATP_CP"] == pytest.approx(0.70)


def test_energy_mix_short_rest_shifts_to_glycolytic():
    long_rest = energy_mix_for_set(SetPrescription(reps=10, rest=90))
    short_rest = energy_mix_for_set(SetPrescription(reps=10, rest=45))
    assert short_rest["Glycolytic"] > long_rest["Glycolytic"]
    assert short_rest["ATP_CP"] < long_rest["ATP_CP"]
