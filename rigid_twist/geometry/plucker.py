# Copyright 2021 DeepMind Technologies Limited.
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     https://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
"""Lines in 3D space represented by Plucker coordinates.

A line is stored as a direction `w` and a moment `v = w x q`, where `q` is any
point on the line.  The moment does not depend on which point is chosen.

PluckerLine instances are immutable.
"""

from typing import Sequence, Text, Union

from rigid_twist.transformations import transformations as tr
import numpy as np

_TOL = 1e-10
_CONTAINS_TOL = 1e-8

Vector3 = Union[np.ndarray, Sequence[float]]


def _as_vec3(value, what: Text) -> np.ndarray:
  vec = np.array(value, dtype=np.float64).ravel()
  if vec.shape != (3,):
    raise ValueError(f"{what} should be a 3-vector, got {vec.size} elements")
  return vec


class PluckerLine:
  """A line in 3D given by its direction and moment.

  The component of the moment along the direction is dropped on construction,
  so the stored coordinates always satisfy the Plucker constraint w . v = 0.
  """
  __slots__ = ("_direction", "_moment")

  def __init__(self, direction: Vector3, moment: Vector3):
    direction = _as_vec3(direction, "Direction")
    moment = _as_vec3(moment, "Moment")
    wsq = direction.dot(direction)
    if wsq < _TOL**2:
      raise ValueError("A line needs a non-zero direction")

    self._direction = direction
    self._moment = moment - direction * (direction.dot(moment) / wsq)

    self._direction.flags.writeable = False
    self._moment.flags.writeable = False

  @classmethod
  def from_direction_moment(cls, direction: Vector3,
                            moment: Vector3) -> "PluckerLine":
    return cls(direction, moment)

  @classmethod
  def from_points(cls, p1: Vector3, p2: Vector3) -> "PluckerLine":
    """Returns the line through two distinct points, directed from p2 to p1."""
    p1 = _as_vec3(p1, "Point")
    direction = p1 - _as_vec3(p2, "Point")
    return cls(direction, np.cross(direction, p1))

  @classmethod
  def from_point_direction(cls, point: Vector3,
                           direction: Vector3) -> "PluckerLine":
    direction = _as_vec3(direction, "Direction")
    return cls(direction, np.cross(direction, _as_vec3(point, "Point")))

  def __repr__(self) -> Text:
    return "PluckerLine(direction={}, moment={})".format(
        self.direction, self.moment)

  def __eq__(self, other):
    if isinstance(other, PluckerLine):
      parallel = np.allclose(
          np.cross(self.unit_direction, other.unit_direction), 0)
      return parallel and np.allclose(self.point(), other.point())
    else:
      return NotImplemented

  def __hash__(self):
    # Equal lines may differ in scale and sense, so hash a canonical form.
    unit = self.unit_direction
    if unit[np.argmax(np.abs(unit))] < 0:
      unit = -unit
    canonical = np.round(np.concatenate([unit, self.point()]), 6) + 0.
    return hash(tuple([PluckerLine] + canonical.tolist()))

  @property
  def direction(self) -> np.ndarray:
    return self._direction

  @property
  def moment(self) -> np.ndarray:
    return self._moment

  @property
  def unit_direction(self) -> np.ndarray:
    return tr.unit_vector(self._direction)

  def point(self) -> np.ndarray:
    """Returns the point on the line closest to the origin."""
    w = self._direction
    return np.cross(self._moment, w) / w.dot(w)

  def distance(self, point: Vector3) -> float:
    """Returns the perpendicular distance from `point` to the line."""
    offset = _as_vec3(point, "Point") - self.point()
    return float(np.linalg.norm(np.cross(offset, self.unit_direction)))

  def contains(self, point: Vector3, tol: float = _CONTAINS_TOL) -> bool:
    return self.distance(point) < tol
