from __future__ import annotations

import pytest

from phoenixplay._surface import InMemorySurface
from phoenixplay.models.bucket import Bucket, LayerHandle
from phoenixplay.models.layers import LayerDescription, describe_actor_layer, describe_burn_layer
from phoenixplay.models.playback import StyleMode
from phoenixplay.timeline.playback import PlaybackController
from phoenixplay.timeline.policy import VisibilityPolicy, is_visible, start_offset
from phoenixplay.timeline.registry import LayerRegistry


def _build(
    policy: VisibilityPolicy, buckets: int = 5, *, ignition_minutes: float = 0.0
) -> tuple[InMemorySurface, PlaybackController]:
    surface = InMemorySurface()
    controller: PlaybackController | None = None

    def describe(handle: LayerHandle) -> LayerDescription:
        assert controller is not None
        if policy == VisibilityPolicy.MONOTONIC:
            return describe_burn_layer(handle, controller.state)
        return describe_actor_layer(handle, controller.state)

    prefix = "phoenix" if policy == VisibilityPolicy.MONOTONIC else "pop"
    registry = LayerRegistry(surface, prefix=prefix, describe=describe)
    controller = PlaybackController(surface, registry, policy=policy, step_minutes=10, default_opacity=0.4)
    controller.set_ignition(ignition_minutes)
    for i in range(buckets):
        registry.register(Bucket(index=i, lower_bound_minutes=i * 10, step_minutes=10))
    return surface, controller


def _visible_indices(surface: InMemorySurface, prefix: str = "phoenix") -> list[int]:
    return sorted(int(layer_id.removeprefix(f"{prefix}-layer")) for layer_id in surface.visible_layers())


class TestPolicy:
    def test_start_offset(self) -> None:
        assert start_offset(480, 10) == 48.0
        assert start_offset(485, 10) == 48.5

    def test_null_target_hides_everything(self) -> None:
        assert not is_visible(0, None, policy=VisibilityPolicy.MONOTONIC)
        assert not is_visible(0, None, policy=VisibilityPolicy.EXCLUSIVE_SNAPSHOT)

    def test_monotonic_in_target(self) -> None:
        for index in range(10):
            flags = [is_visible(index, t, policy=VisibilityPolicy.MONOTONIC, offset=3) for t in range(-2, 20)]
            # Once visible, a bucket stays visible for every later target.
            assert flags == sorted(flags)


class TestMonotonicSeek:
    def test_ignition_offsets_the_timeline(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 6, ignition_minutes=480)

        assert controller.start_offset == 48.0
        controller.seek(50)

        assert _visible_indices(surface) == [0, 1, 2]
        assert controller.state.current_bucket == 50

    def test_fractional_offset(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 4, ignition_minutes=485)

        controller.seek(50)

        assert _visible_indices(surface) == [0, 1]

    def test_seek_is_idempotent(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 5)
        controller.seek(2)
        visible = surface.visible_layers()
        calls_before = {m: surface.count_calls(m) for m in ("create_layer", "destroy_layer", "create_source")}

        controller.seek(2)

        assert surface.visible_layers() == visible
        assert {m: surface.count_calls(m) for m in calls_before} == calls_before

    def test_seek_backwards_hides_later_buckets(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 5)
        controller.seek(4)
        controller.seek(1)

        assert _visible_indices(surface) == [0, 1]

    @pytest.mark.parametrize(("target", "expected"), [(-1, []), (100, [0, 1, 2])])
    def test_out_of_range_targets_clamp(self, target: int, expected: list[int]) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 3)

        controller.seek(target)

        assert _visible_indices(surface) == expected

    def test_missing_layer_is_skipped(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 3)
        surface.destroy_layer("phoenix-layer1")

        controller.seek(2)

        assert _visible_indices(surface) == [0, 2]

    def test_final_bucket_target_shows_whole_dataset(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 4, ignition_minutes=600)

        target = controller.final_bucket_target()
        controller.seek(target)

        assert target == 63.0
        assert _visible_indices(surface) == [0, 1, 2, 3]


class TestSnapshotSeek:
    def test_only_target_bucket_is_visible(self) -> None:
        surface, controller = _build(VisibilityPolicy.EXCLUSIVE_SNAPSHOT, 5)

        controller.seek(2)
        assert _visible_indices(surface, "pop") == [2]

        controller.seek(4)
        assert _visible_indices(surface, "pop") == [4]

    def test_ignition_is_ignored(self) -> None:
        _, controller = _build(VisibilityPolicy.EXCLUSIVE_SNAPSHOT, 3, ignition_minutes=480)

        assert controller.start_offset == 0.0
        assert controller.final_bucket_target() == 2

    @pytest.mark.parametrize("target", [-1, 5, 99, None])
    def test_out_of_range_hides_all(self, target: int | None) -> None:
        surface, controller = _build(VisibilityPolicy.EXCLUSIVE_SNAPSHOT, 5)
        controller.seek(3)

        controller.seek(target)

        assert surface.visible_layers() == []

    def test_style_change_is_rejected(self) -> None:
        _, controller = _build(VisibilityPolicy.EXCLUSIVE_SNAPSHOT, 2)

        with pytest.raises(ValueError):
            controller.set_style(StyleMode.EXTRUDED)


class TestOpacity:
    def test_pushes_to_every_layer_without_touching_visibility(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 3)
        controller.seek(1)

        controller.set_opacity(0.7)

        assert controller.state.opacity == 0.7
        assert all(surface.paint_value(f"phoenix-layer{i}", "opacity") == 0.7 for i in range(3))
        assert _visible_indices(surface) == [0, 1]

    @pytest.mark.parametrize("value", [-0.1, 1.5])
    def test_rejects_out_of_range(self, value: float) -> None:
        _, controller = _build(VisibilityPolicy.MONOTONIC, 1)

        with pytest.raises(ValueError):
            controller.set_opacity(value)

        assert controller.state.opacity == 0.4

    def test_rejected_for_actor_playback(self) -> None:
        surface, controller = _build(VisibilityPolicy.EXCLUSIVE_SNAPSHOT, 2)

        with pytest.raises(ValueError):
            controller.set_opacity(0.5)

        assert controller.state.opacity == 0.4
        assert surface.count_calls("set_layer_paint_property") == 0


class TestStyle:
    def test_toggle_recreates_layers_and_restores_visibility(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 4)
        controller.seek(1)
        sources_created = surface.count_calls("create_source")

        mode = controller.toggle_3d()

        assert mode == StyleMode.EXTRUDED
        assert controller.state.style_mode == StyleMode.EXTRUDED
        assert surface.count_calls("create_source") == sources_created
        assert surface.count_calls("destroy_layer") == 4
        layer = surface.layers["phoenix-layer0"].description
        assert layer["renderKind"] == "extruded"
        assert layer["filter"] == ["has", "FLAME_HT"]
        assert _visible_indices(surface) == [0, 1]

    def test_toggle_survives_a_layer_lost_from_the_surface(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 3)
        controller.seek(2)
        surface.destroy_layer("phoenix-layer1")

        controller.toggle_3d()

        assert sorted(surface.layers) == ["phoenix-layer0", "phoenix-layer1", "phoenix-layer2"]
        assert all(layer.description["renderKind"] == "extruded" for layer in surface.layers.values())
        assert _visible_indices(surface) == [0, 1, 2]

    def test_toggle_back_to_flat(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 2)

        controller.toggle_3d()
        mode = controller.toggle_3d()

        assert mode == StyleMode.FLAT
        assert "filter" not in surface.layers["phoenix-layer0"].description
        assert surface.visible_layers() == []

    def test_recreated_layers_keep_current_opacity(self) -> None:
        surface, controller = _build(VisibilityPolicy.MONOTONIC, 2)
        controller.set_opacity(0.9)

        controller.set_style(StyleMode.EXTRUDED)

        assert surface.paint_value("phoenix-layer1", "opacity") == 0.9


def test_reset_restores_defaults() -> None:
    _, controller = _build(VisibilityPolicy.MONOTONIC, 2, ignition_minutes=480)
    controller.seek(49)
    controller.set_opacity(1.0)
    controller.toggle_3d()

    controller.reset()

    assert controller.state.current_bucket is None
    assert controller.state.style_mode == StyleMode.FLAT
    assert controller.state.opacity == 0.4
    assert controller.start_offset == 0.0
