"""The map scene: pan a crosshair over points of interest and pick one to visit."""

from __future__ import annotations

import enum
import logging
import math
import random
from dataclasses import dataclass, field
from typing import Any, FrozenSet, List, Optional, Sequence, Tuple

import numpy as np

from ogbengine.color import hex_to_rgba
from ogbengine.drawing import DrawFrame
from ogbengine.quad import DrawQuad, Vec2, Vec4
from ogbengine.transform import identity, orthographic_projection, scaling, translation

log = logging.getLogger(__name__)

COLOR_WHITE: Vec4 = (1.0, 1.0, 1.0, 1.0)
COLOR_RED: Vec4 = (1.0, 0.0, 0.0, 1.0)
COLOR_BLACK: Vec4 = (0.0, 0.0, 0.0, 1.0)

KEY_SPACEBAR = "SPACE"
KEY_ESCAPE = "ESCAPE"

WINDOW_TITLE = "game thing"
WINDOW_WIDTH = 1280
WINDOW_HEIGHT = 720
CLEAR_COLOR = hex_to_rgba(0xF6D9A7FF)

CAM_MOVE_SPEED = 50.0
DEFAULT_ZOOM = 5.0
DEFAULT_CROSSHAIR_RANGE = 5.0
POINT_OF_INTEREST_COUNT = 3
POINT_OF_INTEREST_RADIUS = 50.0

HOUSE_SIZE: Vec2 = (9.0, 7.0)
POI_SIZE: Vec2 = (10.0, 17.0)
CROSSHAIR_SIZE: Vec2 = (7.0, 7.0)

POI_NAME_OFFSET: Vec2 = (15.0, 0.0)
POI_DESC_OFFSET: Vec2 = (20.0, -5.0)

POI_NAMES: Tuple[str, ...] = (
    "Abandoned House",
    "Abandoned Supermarket",
    "Old Quarry",
    "Ruined Construction Site",
    "Jonty's Bedroom",
    "Old Factory",
)
POI_DESCRIPTIONS: Tuple[str, ...] = (
    "An Old Abandoned House.",
    "An Old Abandoned Supermarket.",
    "The old quarry, used to run deep until it flooded.",
    "A Decaying Contruction Site.",
    "The man cave of an infamous gooner.",
    "Wonder what they used to make here.",
)


class Level(enum.Enum):
    """Which scene is active."""

    MENU = enum.auto()
    BASE = enum.auto()
    MAP = enum.auto()
    STRUCTURE = enum.auto()
    LEVEL_SWITCH = enum.auto()


@dataclass
class Entity:
    """Something placed in the world with an image and a label."""

    pos: Vec2 = (0.0, 0.0)
    image: Optional[Any] = None
    name: str = ""
    description: str = ""


@dataclass(frozen=True)
class InputState:
    """Keys held down and keys pressed this frame."""

    keys_down: FrozenSet[str] = frozenset()
    keys_just_pressed: FrozenSet[str] = frozenset()

    def is_down(self, key: str) -> bool:
        return key in self.keys_down

    def just_pressed(self, key: str) -> bool:
        return key in self.keys_just_pressed


@dataclass(frozen=True)
class Label:
    """A piece of text the scene wants shown this frame."""

    text: str
    position: Vec2
    scale: float


def _add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def check_collision(a: Entity, b: Entity, range_: float) -> Optional[Entity]:
    """Return b if a lies within range_ of b on both axes, else None."""
    ax, ay = a.pos
    bx, by = b.pos
    if bx - range_ <= ax <= bx + range_ and by - range_ <= ay <= by + range_:
        return b
    return None


def generate_points_of_interest(rng: Optional[random.Random] = None) -> List[Entity]:
    """Place points of interest on a circle around the origin with random labels."""
    rng = rng if rng is not None else random.Random()
    points = []
    for _ in range(POINT_OF_INTEREST_COUNT):
        # The angle is deliberately truncated to a whole number.
        angle = int(rng.uniform(0, 359) * math.pi * 2)
        position = (
            math.cos(angle) * POINT_OF_INTEREST_RADIUS,
            math.sin(angle) * POINT_OF_INTEREST_RADIUS,
        )
        index = rng.randrange(len(POI_NAMES))
        points.append(
            Entity(pos=position, name=POI_NAMES[index], description=POI_DESCRIPTIONS[index])
        )
    return points


class MapScene:
    """Game state for the map: camera, crosshair, points of interest and prompt."""

    def __init__(
        self,
        points_of_interest: Optional[Sequence[Entity]] = None,
        rng: Optional[random.Random] = None,
        house_image: Any = None,
        crosshair_image: Any = None,
        poi_image: Any = None,
        window_width: int = WINDOW_WIDTH,
        window_height: int = WINDOW_HEIGHT,
    ) -> None:
        if points_of_interest is None:
            points_of_interest = generate_points_of_interest(rng)
        self.points_of_interest: List[Entity] = list(points_of_interest)
        for poi in self.points_of_interest:
            if poi.image is None:
                poi.image = poi_image
        self.map_entities: List[Entity] = [Entity(image=house_image)]
        self.crosshair = Entity(pos=(0.0, 0.0), image=crosshair_image)
        self.crosshair_range = DEFAULT_CROSSHAIR_RANGE
        self.crosshair_color: Vec4 = COLOR_WHITE
        self.window_width = window_width
        self.window_height = window_height
        self.clear_color: Vec4 = CLEAR_COLOR

        self.current_level = Level.MAP
        self.level_to_switch: Optional[Level] = None
        self.can_draw_scene = True
        self.draw_prompt = False
        self.prompt_select = True
        self.draw_poi_names = True
        self.can_move_camera = True
        self.should_close = False

        self.zoom = DEFAULT_ZOOM
        self.camera_view: np.ndarray = identity()
        self.camera_xform: np.ndarray = identity()
        self.selected_poi: Optional[Entity] = None
        self.labels: List[Label] = []

    def update(self, input_state: InputState, delta: float) -> None:
        """Advance the scene by delta seconds with the given input."""
        self.labels = []
        if self.current_level is Level.LEVEL_SWITCH:
            if self.can_draw_scene:
                self.clear_color = COLOR_BLACK
            self.current_level = self.level_to_switch
        elif self.current_level is Level.MAP:
            self._update_map(input_state, delta)

        if input_state.just_pressed(KEY_ESCAPE):
            self.should_close = True

    def _camera_axis(self, input_state: InputState) -> Vec2:
        x = y = 0.0
        if self.can_move_camera:
            if input_state.is_down("A"):
                x -= 1.0
            if input_state.is_down("D"):
                x += 1.0
            if input_state.is_down("S"):
                y -= 1.0
            if input_state.is_down("W"):
                y += 1.0
        length = math.hypot(x, y)
        if length == 0.0:
            return (0.0, 0.0)
        return (x / length, y / length)

    def _update_map(self, input_state: InputState, delta: float) -> None:
        axis = self._camera_axis(input_state)
        move = (axis[0] * delta * CAM_MOVE_SPEED, axis[1] * delta * CAM_MOVE_SPEED)
        self.camera_view = self.camera_view @ translation(move[0], move[1], 0.0)
        self.camera_xform = self.camera_view @ scaling(1.0 / self.zoom, 1.0 / self.zoom, 1.0)
        self.crosshair.pos = _add(self.crosshair.pos, move)

        self.crosshair_color = COLOR_WHITE
        pos = self.crosshair.pos
        if self.draw_prompt:
            self.crosshair_color = COLOR_RED
            option_base = _add(pos, POI_DESC_OFFSET)
            self.labels.extend(
                [
                    Label("Would you like to go here?", _add(pos, POI_NAME_OFFSET), 0.15),
                    Label("Yes", _add(option_base, (0.0, -3.0)), 0.16),
                    Label("No", _add(option_base, (14.0, -3.0)), 0.16),
                ]
            )
            if input_state.just_pressed("A"):
                self.prompt_select = True
            elif input_state.just_pressed("D"):
                self.prompt_select = False
            elif input_state.just_pressed(KEY_SPACEBAR):
                if not self.prompt_select:
                    self.can_move_camera = True
                    self.draw_prompt = False
                    self.draw_poi_names = True
                    self.prompt_select = True
                    log.debug("prompt declined")
                else:
                    self.level_to_switch = Level.STRUCTURE
                    self.current_level = Level.LEVEL_SWITCH
                return
            arrow_offset = (-4.0, -3.0) if self.prompt_select else (10.0, -3.0)
            self.labels.append(Label(">", _add(option_base, arrow_offset), 0.16))

        self.selected_poi = None
        for poi in self.points_of_interest:
            selected = check_collision(self.crosshair, poi, self.crosshair_range)
            if selected is None:
                continue
            self.selected_poi = selected
            if input_state.just_pressed(KEY_SPACEBAR) and not self.draw_prompt:
                self.can_move_camera = False
                self.draw_prompt = True
                self.draw_poi_names = False
            if self.draw_poi_names:
                self.crosshair_color = COLOR_RED
                self.labels.append(Label(selected.name, _add(pos, POI_NAME_OFFSET), 0.15))
                self.labels.append(Label(selected.description, _add(pos, POI_DESC_OFFSET), 0.08))
            break

    def draw(self, frame: DrawFrame) -> List[DrawQuad]:
        """Draw the active scene into frame and return the quads that were added."""
        half_w = frame.window_width * 0.5
        half_h = frame.window_height * 0.5
        frame.projection = orthographic_projection(-half_w, half_w, -half_h, half_h, -1, 10)
        drawn: List[Optional[DrawQuad]] = []

        if self.current_level is Level.LEVEL_SWITCH:
            if self.can_draw_scene:
                for step in range(11):
                    alpha = step / 10.0
                    drawn.append(
                        frame.draw_rect(
                            (0.0, 0.0),
                            (float(frame.window_width), float(frame.window_height)),
                            (0.0, 0.0, 0.0, alpha),
                        )
                    )
                self.clear_color = COLOR_BLACK
        elif self.current_level is Level.MAP:
            frame.camera_xform = self.camera_xform
            if self.can_draw_scene:
                for entity in self.map_entities:
                    drawn.append(frame.draw_image(entity.image, (0.0, 0.0), HOUSE_SIZE, COLOR_WHITE))
                for poi in self.points_of_interest:
                    drawn.append(frame.draw_image(poi.image, poi.pos, POI_SIZE, COLOR_WHITE))
            drawn.append(
                frame.draw_image(
                    self.crosshair.image, self.crosshair.pos, CROSSHAIR_SIZE, self.crosshair_color
                )
            )
        return [quad for quad in drawn if quad is not None]