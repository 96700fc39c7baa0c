"""Tracking of game objects and the player's choice of heading."""

from __future__ import annotations

import logging
import math
import random
import struct
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict, List, Optional, Tuple

log = logging.getLogger(__name__)

MAX_OBJECTS_PER_KIND = 100
RECORD_SIZE = 12
UNASSIGNED_PLAYER = 255

DANGER_DIST_SPARK = 80.0
DANGER_DIST_GLUE = 150.0
DANGER_DIST_BIGGER = 150.0

PREY_WEIGHT = 5.0
FOOD_WEIGHT = 3.0
MIN_DISTANCE = 1.0
EXPLORE_SPREAD = 0.6

_RECORD = struct.Struct("<BBHff")


class ObjectKind(IntEnum):
    """Kinds of objects on the map."""

    PLAYER = 0
    FOOD = 1
    SPARK = 2
    GLUE = 3


@dataclass(frozen=True)
class TrackedObject:
    """One object as reported in an object update."""

    object_type: int
    object_no: int
    hp: int
    x: float
    y: float


@dataclass
class Surroundings:
    """Distances and bearings of the nearest objects of interest."""

    bigger_player_dist: float = math.inf
    bigger_player_angle: float = 0.0
    smaller_player_dist: float = math.inf
    smaller_player_angle: float = 0.0
    food_dist: float = math.inf
    food_angle: float = 0.0
    spark_dist: float = math.inf
    spark_angle: float = 0.0
    glue_dist: float = math.inf
    glue_angle: float = 0.0


def parse_object_records(payload: bytes) -> List[TrackedObject]:
    """Split an object update payload into its twelve-byte records."""
    payload = bytes(payload)
    if len(payload) % RECORD_SIZE:
        raise ValueError(f"Invalid payload length: {len(payload)}")
    return [TrackedObject(*fields) for fields in _RECORD.iter_unpack(payload)]


def compute_distance(x1: float, y1: float, x2: float, y2: float) -> float:
    """Euclidean distance between two points."""
    return math.hypot(x2 - x1, y2 - y1)


def compute_angle(x1: float, y1: float, x2: float, y2: float) -> float:
    """Bearing from the first point to the second, in radians."""
    return math.atan2(y2 - y1, x2 - x1)


def reverse_angle(angle: float) -> float:
    """The opposite direction, kept within (-pi, pi]."""
    angle += math.pi
    if angle > math.pi:
        angle -= 2.0 * math.pi
    return angle


def attraction_score(distance: float, weight: float, min_distance: float) -> float:
    """How attractive a target is: heavier and nearer scores higher."""
    return weight / (distance + min_distance)


def normalize_angle(angle: float) -> float:
    """Bring an angle into [0, 2*pi)."""
    if not math.isfinite(angle):
        raise ValueError(f"angle must be finite: {angle}")
    result = angle % math.tau
    if result >= math.tau:
        result -= math.tau
    return result


def random_explore_angle(last: float, rng) -> float:
    """Wander: the previous heading with a little random noise."""
    noise = (rng.randrange(1000) / 1000.0 - 0.5) * EXPLORE_SPREAD
    return normalize_angle(last + noise)


def avoid_angle(threat_angle: float, rng) -> float:
    """Turn left, right or back from a threat, chosen at random."""
    choice = rng.randrange(3)
    if choice == 0:
        return normalize_angle(threat_angle + math.pi / 2)
    if choice == 1:
        return normalize_angle(threat_angle - math.pi / 2)
    return normalize_angle(threat_angle + math.pi)


class World:
    """What the player knows of the map, and how it picks a heading."""

    def __init__(self, rng: Optional[random.Random] = None,
                 capacity: int = MAX_OBJECTS_PER_KIND) -> None:
        if capacity < 0:
            raise ValueError("capacity must not be negative")
        self.rng = rng if rng is not None else random.Random()
        self.capacity = capacity
        self.objects: Dict[ObjectKind, List[TrackedObject]] = {
            kind: [] for kind in ObjectKind
        }
        self.player_no = UNASSIGNED_PLAYER
        self.hp = 0
        self.x = 0.0
        self.y = 0.0
        self.last_angle = 0.0

    def update(self, obj: TrackedObject) -> None:
        """Add, replace or drop an object in the list of its kind."""
        kind = ObjectKind(obj.object_type)
        tracked = self.objects[kind]
        for index, existing in enumerate(tracked):
            if existing.object_no == obj.object_no:
                if obj.hp == 0:
                    del tracked[index]
                    log.info("Removed object type %d, no=%d due to 0 hp",
                             obj.object_type, obj.object_no)
                else:
                    tracked[index] = obj
                    log.info("Updated object type %d, no=%d",
                             obj.object_type, obj.object_no)
                return

        if obj.hp == 0:
            log.info("Ignoring new object type %d, no=%d with 0 hp",
                     obj.object_type, obj.object_no)
        elif len(tracked) >= self.capacity:
            log.info("Object list for type %d is full, cannot add no=%d",
                     obj.object_type, obj.object_no)
        else:
            tracked.append(obj)
            log.info("Added new object type %d, no=%d",
                     obj.object_type, obj.object_no)

    def apply_object_update(self, payload: bytes) -> None:
        """Apply every record of an OBJECT_UPDATE payload."""
        for obj in parse_object_records(payload):
            is_me = (obj.object_type == ObjectKind.PLAYER
                     and obj.object_no == self.player_no)
            if is_me:
                self.x, self.y, self.hp = obj.x, obj.y, obj.hp
            log.info("Received object: type=%d no=%d hp=%d x=%.2f y=%.2f%s",
                     obj.object_type, obj.object_no, obj.hp, obj.x, obj.y,
                     " <-- me" if is_me else "")
            if obj.object_type < len(ObjectKind):
                self.update(obj)
            else:
                log.info("Unknown object type: %d", obj.object_type)

    def _closest(self, kind: ObjectKind) -> Tuple[float, float]:
        best_dist, best_angle = math.inf, 0.0
        for obj in self.objects[kind]:
            if obj.hp <= 0:
                continue
            dist = compute_distance(self.x, self.y, obj.x, obj.y)
            if dist < best_dist:
                best_dist = dist
                best_angle = compute_angle(self.x, self.y, obj.x, obj.y)
        return best_dist, best_angle

    def survey(self) -> Surroundings:
        """Find the nearest objects of each interesting kind."""
        found = Surroundings()
        for obj in self.objects[ObjectKind.PLAYER]:
            if obj.hp == 0:
                continue
            dist = compute_distance(self.x, self.y, obj.x, obj.y)
            angle = compute_angle(self.x, self.y, obj.x, obj.y)
            if obj.hp > self.hp and dist < found.bigger_player_dist:
                found.bigger_player_dist, found.bigger_player_angle = dist, angle
            elif obj.hp < self.hp and dist < found.smaller_player_dist:
                found.smaller_player_dist, found.smaller_player_angle = dist, angle
        found.food_dist, found.food_angle = self._closest(ObjectKind.FOOD)
        found.spark_dist, found.spark_angle = self._closest(ObjectKind.SPARK)
        found.glue_dist, found.glue_angle = self._closest(ObjectKind.GLUE)
        return found

    def decide(self, surroundings: Surroundings) -> float:
        """Choose a heading and remember it as the last one."""
        self.last_angle = self._choose(surroundings)
        return self.last_angle

    def _choose(self, s: Surroundings) -> float:
        if s.spark_dist < DANGER_DIST_SPARK:
            return avoid_angle(s.spark_angle, self.rng)
        if s.bigger_player_dist < DANGER_DIST_BIGGER:
            return avoid_angle(s.bigger_player_angle, self.rng)

        prey_found = math.isfinite(s.smaller_player_dist)
        food_found = math.isfinite(s.food_dist)
        score_prey = (attraction_score(s.smaller_player_dist, PREY_WEIGHT, MIN_DISTANCE)
                      if prey_found else 0.0)
        score_food = (attraction_score(s.food_dist, FOOD_WEIGHT, MIN_DISTANCE)
                      if food_found else 0.0)

        if prey_found and score_prey >= score_food:
            return s.smaller_player_angle
        if food_found:
            return s.food_angle
        return random_explore_angle(self.last_angle, self.rng)

    def compute_move_angle(self) -> float:
        """Survey the map and decide where to move."""
        return self.decide(self.survey())