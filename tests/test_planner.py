import math

import numpy as np
import pytest

from pancam_app.models.instruments import InstrumentRegistry, InstrumentSpec, build_default_registry
from pancam_app.models.plan_state import PanoramaRequest
from pancam_app.models.ptu import PanTiltUnit, PTUState, world_pose_of
from pancam_app.planning import PanoramaPlanner, capture_angles


def test_capture_angles_two_samples():
    assert capture_angles(-70.0, -43.5, 2) == [-70.0, -43.5]
    assert capture_angles(10.0, 10.0, 2) == [10.0]


def test_capture_angles_raises_low_counts_to_two():
    assert capture_angles(0.0, 40.0, 1) == [0.0, 40.0]
    assert capture_angles(5.0, 5.0, 0) == [5.0]


def test_capture_angles_evenly_spaced_with_endpoints():
    assert capture_angles(0.0, 90.0, 4) == pytest.approx([0.0, 30.0, 60.0, 90.0])
    angles = capture_angles(-170.0, 33.3, 29)
    assert len(angles) == 29
    assert angles[0] == -170.0
    assert angles[-1] == 33.3
    steps = np.diff(angles)
    np.testing.assert_allclose(steps, (33.3 + 170.0) / 28, rtol=1e-9)


def test_capture_angles_many_samples_without_movement():
    assert capture_angles(12.0, 12.0, 5) == [12.0] * 5


def test_plan_example_origin_mounted_camera():
    registry = InstrumentRegistry(
        [InstrumentSpec("lwac", vertical_fov_deg=38.0, aspect_ratio=1.0, near_distance=1.0, far_distance=2.0)]
    )
    ptu = PanTiltUnit(registry)
    planner = PanoramaPlanner(ptu)

    result = planner.plan(
        PanoramaRequest(start_deg=-70.0, stop_deg=-43.5, sample_count=2, active_instrument_ids=frozenset({"lwac"}))
    )

    assert result.capture_angles == (-70.0, -43.5)
    assert [tile.capture_pan_deg for tile in result.tiles] == [-70.0, -43.5]
    for tile in result.tiles:
        assert math.isclose(tile.footprint_height, 1.378, abs_tol=1e-3)
        assert math.isclose(tile.footprint_width, 1.378, abs_tol=1e-3)
        assert tile.depth == 2.0
    assert result.tiles_per_capture == 1
    assert ptu.pan_deg == 0.0


def test_plan_places_tiles_from_camera_pose_at_capture():
    registry = build_default_registry()
    ptu = PanTiltUnit(registry)
    planner = PanoramaPlanner(ptu)
    request = PanoramaRequest(
        start_deg=-30.0, stop_deg=30.0, sample_count=3, fixed_tilt_deg=20.0,
        active_instrument_ids=frozenset({"rwac", "hrc"}),
    )

    result = planner.plan(request)

    assert [tile.instrument_id for tile in result.tiles] == ["rwac", "hrc"] * 3
    for tile in result.tiles:
        spec = registry.get(tile.instrument_id)
        pose = world_pose_of(spec, PTUState(tile.capture_pan_deg, tile.capture_tilt_deg))
        np.testing.assert_allclose(tile.world_position, pose.position + spec.far_distance * pose.direction)
        np.testing.assert_allclose(tile.world_direction, pose.direction)
        assert tile.capture_tilt_deg == 20.0


def test_plan_resets_pan_and_keeps_tilt():
    ptu = PanTiltUnit(build_default_registry())
    ptu.set_pan(55.0)
    planner = PanoramaPlanner(ptu)
    planner.plan(
        PanoramaRequest(start_deg=100.0, stop_deg=150.0, sample_count=6, fixed_tilt_deg=-25.0,
                        active_instrument_ids=frozenset({"lwac"}))
    )
    assert ptu.pan_deg == 0.0
    assert ptu.tilt_deg == -25.0


def test_plan_does_not_mutate_request():
    ptu = PanTiltUnit(build_default_registry())
    request = PanoramaRequest(start_deg=-10.0, stop_deg=10.0, sample_count=1,
                              active_instrument_ids=frozenset({"hrc"}))
    PanoramaPlanner(ptu).plan(request)
    assert request.sample_count == 1
    assert request.start_deg == -10.0


def test_plan_uses_depth_override():
    ptu = PanTiltUnit(build_default_registry())
    depths = {"hrc": 6.0}
    planner = PanoramaPlanner(ptu, depth_for=depths.get)
    result = planner.plan(
        PanoramaRequest(sample_count=2, active_instrument_ids=frozenset({"hrc", "lwac"}))
    )
    by_id = {tile.instrument_id: tile for tile in result.tiles}
    assert by_id["hrc"].depth == 6.0
    assert by_id["lwac"].depth == 2.0
    assert math.isclose(by_id["hrc"].footprint_height, 2.0 * 6.0 * math.tan(math.radians(2.44)))


def test_plan_without_active_instruments_yields_no_tiles():
    ptu = PanTiltUnit(build_default_registry())
    result = PanoramaPlanner(ptu).plan(PanoramaRequest(start_deg=0.0, stop_deg=90.0, sample_count=5))
    assert len(result.capture_angles) == 5
    assert result.tiles == ()
    assert result.tiles_per_capture == 0
