import math

import numpy as np
import pytest

from pancam_app.errors import UnknownInstrument, UnknownPreset
from pancam_app.math.angles import clamp, deg_to_rad, rad_to_deg
from pancam_app.models.instruments import build_default_registry
from pancam_app.models.ptu import PanTiltUnit, PTUState, rig_pose, world_pose_of


def test_angle_conversions():
    assert math.isclose(deg_to_rad(180.0), math.pi)
    assert math.isclose(rad_to_deg(math.pi / 2), 90.0)
    assert clamp(200.0, -180.0, 180.0) == 180.0
    assert clamp(-5.0, 0.0, 1.0) == 0.0


def test_home_rig_pose_looks_forward_from_base_offset():
    pose = rig_pose(PTUState())
    np.testing.assert_allclose(pose.position, [0.0, 1.9, -0.5])
    np.testing.assert_allclose(pose.direction, [0.0, 0.0, -1.0], atol=1e-12)
    np.testing.assert_allclose(pose.up, [0.0, 1.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(pose.matrix()[:3, 3], [0.0, 1.9, -0.5])


def test_pan_rotates_about_vertical_axis():
    pose = rig_pose(PTUState(pan_deg=90.0))
    np.testing.assert_allclose(pose.direction, [-1.0, 0.0, 0.0], atol=1e-12)
    np.testing.assert_allclose(pose.position, [0.0, 1.9, -0.5])


def test_positive_tilt_looks_down():
    pose = rig_pose(PTUState(tilt_deg=30.0))
    assert math.isclose(pose.direction[1], -0.5, abs_tol=1e-12)
    assert math.isclose(pose.direction[2], -math.cos(math.radians(30.0)), abs_tol=1e-12)


def test_tilt_is_applied_inside_panned_frame():
    pose = rig_pose(PTUState(pan_deg=90.0, tilt_deg=30.0))
    np.testing.assert_allclose(pose.direction, [-math.cos(math.radians(30.0)), -0.5, 0.0], atol=1e-12)
    for pan in (-120.0, -15.0, 45.0, 170.0):
        swept = rig_pose(PTUState(pan_deg=pan, tilt_deg=30.0))
        assert math.isclose(swept.direction[1], -0.5, abs_tol=1e-12)


def test_instrument_mount_offset_follows_pan():
    registry = build_default_registry()
    rwac = registry.get("rwac")
    home = world_pose_of(rwac, PTUState())
    np.testing.assert_allclose(home.position, [0.25, 2.055, -0.52], atol=1e-12)

    panned = world_pose_of(rwac, PTUState(pan_deg=90.0))
    np.testing.assert_allclose(panned.position, [-0.02, 2.055, -0.75], atol=1e-12)


def test_toe_in_is_unaffected_by_pan_and_tilt():
    registry = build_default_registry()
    lwac = registry.get("lwac")
    home = world_pose_of(lwac, PTUState())
    assert home.direction[0] > 0.0  # left camera converges toward +X

    for pan, tilt in [(0.0, 0.0), (-70.0, 65.75), (130.0, -40.0)]:
        state = PTUState(pan, tilt)
        rig = rig_pose(state)
        cam = world_pose_of(lwac, state)
        angle = math.acos(float(np.clip(np.dot(rig.direction, cam.direction), -1.0, 1.0)))
        assert math.isclose(angle, 0.08, abs_tol=1e-9)
        np.testing.assert_allclose(cam.up, rig.up, atol=1e-12)


def test_set_pan_and_tilt_clamp_out_of_range_values():
    ptu = PanTiltUnit(build_default_registry())
    assert ptu.set_pan(200.0).pan_deg == 180.0
    assert ptu.set_pan(-181.0).pan_deg == -180.0
    assert ptu.set_tilt(120.0).tilt_deg == 90.0
    assert ptu.set_tilt(-95.0).tilt_deg == -90.0


def test_set_pan_is_idempotent():
    ptu = PanTiltUnit(build_default_registry())
    first = ptu.set_pan(-43.5)
    second = ptu.set_pan(-43.5)
    assert first == second == PTUState(-43.5, 0.0)
    ptu.set_tilt(12.0)
    assert ptu.set_tilt(12.0) == PTUState(-43.5, 12.0)


def test_presets_and_home():
    ptu = PanTiltUnit(build_default_registry())
    assert ptu.apply_preset("pct_lwac") == PTUState(-70.0, 65.75)
    assert ptu.apply_preset("park") == PTUState(0.0, 60.0)
    assert ptu.home() == PTUState(0.0, 0.0)
    with pytest.raises(UnknownPreset):
        ptu.apply_preset("stow")


def test_world_pose_of_unknown_instrument():
    ptu = PanTiltUnit(build_default_registry())
    with pytest.raises(UnknownInstrument):
        ptu.world_pose_of("ncam")
    pose = ptu.world_pose_of("hrc")
    np.testing.assert_allclose(pose.position, [0.154, 2.055, -0.52], atol=1e-12)


def test_world_pose_of_by_id_at_explicit_state():
    registry = build_default_registry()
    ptu = PanTiltUnit(registry)
    state = PTUState(pan_deg=90.0, tilt_deg=30.0)
    pose = ptu.world_pose_of("rwac", state)
    expected = world_pose_of(registry.get("rwac"), state)
    np.testing.assert_allclose(pose.position, expected.position)
    np.testing.assert_allclose(pose.orientation, expected.orientation)
    assert ptu.state == PTUState()
