import math
import random

import pytest

from ogbengine.drawing import DrawFrame
from ogbengine.game import (
    COLOR_RED,
    COLOR_WHITE,
    KEY_ESCAPE,
    KEY_SPACEBAR,
    POI_DESCRIPTIONS,
    POI_NAMES,
    Entity,
    InputState,
    Level,
    MapScene,
    check_collision,
    generate_points_of_interest,
)

NO_INPUT = InputState()


def press(*keys):
    return InputState(keys_just_pressed=frozenset(keys))


def hold(*keys):
    return InputState(keys_down=frozenset(keys))


def far_pois():
    return [Entity(pos=(40.0, 40.0), name=POI_NAMES[2], description=POI_DESCRIPTIONS[2])]


def near_pois():
    return [Entity(pos=(1.0, 1.0), name=POI_NAMES[0], description=POI_DESCRIPTIONS[0])]


def test_collision_inside_returns_target():
    a = Entity(pos=(1.0, 2.0))
    b = Entity(pos=(0.0, 0.0))
    assert check_collision(a, b, 5.0) is b


def test_collision_outside_returns_none():
    a = Entity(pos=(6.0, 0.0))
    b = Entity(pos=(0.0, 0.0))
    assert check_collision(a, b, 5.0) is None


def test_collision_boundary_is_inclusive():
    a = Entity(pos=(5.0, -5.0))
    b = Entity(pos=(0.0, 0.0))
    assert check_collision(a, b, 5.0) is b


def test_generated_points_lie_on_circle_with_matching_labels():
    points = generate_points_of_interest(random.Random(1))
    assert len(points) == 3
    for poi in points:
        assert math.hypot(*poi.pos) == pytest.approx(50.0)
        assert poi.name in POI_NAMES
        assert POI_DESCRIPTIONS[POI_NAMES.index(poi.name)] == poi.description


def test_generation_is_deterministic_for_seed():
    a = generate_points_of_interest(random.Random(7))
    b = generate_points_of_interest(random.Random(7))
    assert [p.pos for p in a] == [p.pos for p in b]


def test_no_input_keeps_crosshair_still():
    scene = MapScene(points_of_interest=far_pois())
    scene.update(NO_INPUT, 1.0)
    assert scene.crosshair.pos == (0.0, 0.0)


def test_moving_right_uses_camera_speed():
    scene = MapScene(points_of_interest=far_pois())
    scene.update(hold("D"), 1.0)
    assert scene.crosshair.pos == pytest.approx((50.0, 0.0))
    assert scene.camera_view[0, 3] == pytest.approx(50.0)


def test_diagonal_movement_is_normalised():
    scene = MapScene(points_of_interest=far_pois())
    scene.update(hold("A", "W"), 0.5)
    x, y = scene.crosshair.pos
    assert math.hypot(x, y) == pytest.approx(25.0)
    assert x < 0 < y


def test_hovering_poi_shows_its_labels():
    scene = MapScene(points_of_interest=near_pois())
    scene.update(NO_INPUT, 0.0)
    texts = [label.text for label in scene.labels]
    assert POI_NAMES[0] in texts
    assert POI_DESCRIPTIONS[0] in texts
    assert scene.crosshair_color == COLOR_RED


def test_space_on_poi_opens_prompt_and_locks_camera():
    scene = MapScene(points_of_interest=near_pois())
    scene.update(press(KEY_SPACEBAR), 0.0)
    assert scene.draw_prompt
    assert not scene.can_move_camera
    scene.update(hold("D"), 1.0)
    assert scene.crosshair.pos == (0.0, 0.0)
    assert "Would you like to go here?" in [label.text for label in scene.labels]


def test_declining_prompt_restores_movement():
    scene = MapScene(points_of_interest=near_pois())
    scene.update(press(KEY_SPACEBAR), 0.0)
    scene.update(press("D"), 0.0)
    assert scene.prompt_select is False
    scene.update(press(KEY_SPACEBAR), 0.0)
    assert scene.can_move_camera
    assert not scene.draw_prompt
    assert scene.prompt_select is True
    assert scene.current_level is Level.MAP


def test_accepting_prompt_switches_to_structure():
    scene = MapScene(points_of_interest=near_pois())
    scene.update(press(KEY_SPACEBAR), 0.0)
    scene.update(press(KEY_SPACEBAR), 0.0)
    assert scene.current_level is Level.LEVEL_SWITCH
    assert scene.level_to_switch is Level.STRUCTURE
    scene.update(NO_INPUT, 0.0)
    assert scene.current_level is Level.STRUCTURE
    assert scene.clear_color == (0.0, 0.0, 0.0, 1.0)


def test_escape_requests_close():
    scene = MapScene(points_of_interest=far_pois())
    scene.update(press(KEY_ESCAPE), 0.0)
    assert scene.should_close


def test_draw_map_adds_house_pois_and_crosshair():
    scene = MapScene(points_of_interest=near_pois(), poi_image="poi", crosshair_image="cross")
    scene.update(NO_INPUT, 0.0)
    frame = DrawFrame(1280, 720)
    quads = scene.draw(frame)
    assert len(quads) == 3
    assert frame.quads == quads
    assert quads[1].image == "poi"
    assert quads[-1].image == "cross"
    assert quads[-1].color == COLOR_RED


def test_draw_crosshair_white_when_nothing_hovered():
    scene = MapScene(points_of_interest=far_pois())
    scene.update(NO_INPUT, 0.0)
    quads = scene.draw(DrawFrame(1280, 720))
    assert quads[-1].color == COLOR_WHITE


def test_draw_level_switch_fades_to_black():
    scene = MapScene(points_of_interest=near_pois())
    scene.current_level = Level.LEVEL_SWITCH
    quads = scene.draw(DrawFrame(1280, 720))
    alphas = [q.color[3] for q in quads]
    assert alphas == sorted(alphas)
    assert alphas[-1] == pytest.approx(1.0)
    assert scene.clear_color == (0.0, 0.0, 0.0, 1.0)