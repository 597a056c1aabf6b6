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
"""Twists: exponential coordinates of SE(2) and SE(3) displacements.

A twist holds a moment part `v` and an angular part `w`:

* SE(2): `v` is a 2-vector and `w` a scalar rotation rate about the implicit
  out-of-plane axis.
* SE(3): `v` and `w` are 3-vectors, `w` being the screw axis direction scaled
  by the rotation rate.

Twist instances are immutable; arithmetic and conversions return new values.

Arithmetic:
`+` adds twist coordinates and `*` scales them by a real number.  This is
vector arithmetic in the Lie algebra, not composition of the displacements,
so in general `(a + b).T()` differs from `a.T() @ b.T()`.

For example:
```python
tw = Twist.from_axis_point([0, 0, 1], [1, 0, 0])
tw.T(np.pi / 2)  # quarter turn about the vertical axis through (1, 0, 0)
tw + tw  # coordinates doubled
2 * tw  # same as above
tw + Twist.from_point([2, 3])  # raises InvalidOperandError
```
"""

import numbers
from typing import Iterable, Optional, Sequence, Text, Union

from absl import logging
from rigid_twist.geometry import plucker
from rigid_twist.transformations import transformations as tr
import numpy as np

_TOL = 1e-10
_Z_AXIS = np.array([0., 0., 1.])

Vector = Union[np.ndarray, Sequence[float]]


class InvalidArgumentError(ValueError):
  """Raised when a twist cannot be built from the given arguments."""


class InvalidOperandError(TypeError):
  """Raised when twist arithmetic is applied to incompatible operands."""


class DegenerateAxisError(ArithmeticError):
  """Raised when the screw axis of a pure translation is requested."""


def _as_vector(value) -> np.ndarray:
  return np.array(value, dtype=np.float64).ravel()


def _as_square_matrix(mat) -> np.ndarray:
  mat = np.asarray(mat, dtype=np.float64)
  if mat.shape not in ((3, 3), (4, 4)):
    raise InvalidArgumentError(
        f"Expected a 3x3 or 4x4 matrix, got shape {mat.shape}")
  return mat


def _unit(direction: np.ndarray) -> np.ndarray:
  try:
    return tr.unit_vector(direction)
  except ValueError as e:
    raise InvalidArgumentError(str(e)) from e


def _format_elements(values) -> Text:
  # Adding 0. turns -0. into 0. so that it prints without a sign.
  return "  ".join(f"{x + 0.:.5g}" for x in np.atleast_1d(values))


class Twist:
  """A twist in se(2) or se(3).

  Build instances with one of the `from_*` factories, or with `create` to
  dispatch on the argument.  The constructor takes the two parts directly.
  """
  __slots__ = ("_v", "_w")

  # Makes numpy defer binary operators, e.g. np.float64(2) * twist, to Twist.
  __array_ufunc__ = None

  def __init__(self, v: Vector, w: Union[float, Vector]):
    """Initializes a Twist from its moment and angular parts.

    Args:
      v: Moment part, a 2-vector (SE(2)) or 3-vector (SE(3)).
      w: Angular part, a scalar (SE(2)) or 3-vector (SE(3)).

    Raises:
      InvalidArgumentError: If the sizes of `v` and `w` are not (2, 1) or
        (3, 3).
    """
    v = _as_vector(v)
    w = _as_vector(w)
    if v.size == 2 and w.size == 1:
      self._w = float(w[0])
    elif v.size == 3 and w.size == 3:
      w.flags.writeable = False
      self._w = w
    else:
      raise InvalidArgumentError(
          f"v and w should have sizes (2, 1) or (3, 3), got ({v.size}, "
          f"{w.size})")
    v.flags.writeable = False
    self._v = v

  @classmethod
  def from_transform(cls, hmat) -> "Twist":
    """Returns the twist whose exponential is the homogeneous transform `hmat`.

    Args:
      hmat: A 3x3 (SE(2)) or 4x4 (SE(3)) homogeneous transform.  Its validity
        as a rigid transform is not checked.

    Raises:
      InvalidArgumentError: If `hmat` is not 3x3 or 4x4, or its bottom-right
        element is not 1.
    """
    hmat = _as_square_matrix(hmat)
    if hmat[-1, -1] != 1:
      raise InvalidArgumentError(
          "Not a homogeneous transform (bottom-right element is "
          f"{hmat[-1, -1]}), use from_algebra_matrix for se(n) matrices")
    if hmat.shape == (4, 4):
      return cls._from_algebra(tr.hmat_log(hmat))
    return cls._from_algebra(tr.hmat_log_2d(hmat))

  @classmethod
  def from_algebra_matrix(cls, mat) -> "Twist":
    """Returns the twist of an augmented skew-symmetric matrix.

    Args:
      mat: A 3x3 or 4x4 matrix [[skew(w), v], [0, 0]].

    Raises:
      InvalidArgumentError: If `mat` is not 3x3 or 4x4, or looks like a
        homogeneous transform (bottom-right element is 1).
    """
    mat = _as_square_matrix(mat)
    if mat[-1, -1] == 1:
      raise InvalidArgumentError(
          "Bottom-right element is 1, use from_transform for homogeneous "
          "transforms")
    return cls._from_algebra(mat)

  @classmethod
  def _from_algebra(cls, mat: np.ndarray) -> "Twist":
    skw, v = tr.hmat_to_rmat_pos(mat)
    return cls(v, tr.vex(skw))

  @classmethod
  def from_coordinates(cls, s: Vector) -> "Twist":
    """Returns the twist with coordinates `s`, as given by `Twist.s()`.

    Args:
      s: 3 elements (vx, vy, w) for SE(2) or 6 elements (v, w) for SE(3).  A
        single-row matrix is accepted.

    Raises:
      InvalidArgumentError: If `s` does not have 3 or 6 elements.
    """
    s = np.asarray(s, dtype=np.float64)
    if s.ndim == 2 and s.shape[0] == 1:
      s = s[0]
    if s.ndim != 1 or s.size not in (3, 6):
      raise InvalidArgumentError(
          f"Expected a vector of 3 or 6 elements, got shape {s.shape}")
    if s.size == 3:
      return cls(s[0:2], s[2])
    return cls(s[0:3], s[3:6])

  @classmethod
  def from_point(cls, point: Vector) -> "Twist":
    """Returns the unit-rate SE(2) rotation about `point`."""
    q = _as_vector(point)
    if q.size != 2:
      raise InvalidArgumentError(
          f"Expected a 2D point, got {q.size} elements")
    v = -np.cross(_Z_AXIS, np.append(q, 0.))
    return cls(v[0:2], 1.)

  @classmethod
  def from_axis_point(cls, direction: Vector, point: Vector,
                      pitch: Optional[float] = None) -> "Twist":
    """Returns the unit-rate SE(3) rotation about an axis.

    Args:
      direction: Direction of the axis, normalized here.
      point: Any point on the axis.
      pitch: If provided, translation along the axis per radian of rotation.

    Raises:
      InvalidArgumentError: If `direction` has fewer than 3 elements (SE(2)
        rotations are built from a point alone, see `from_point`), or either
        argument is not a 3-vector, or `direction` is zero.
    """
    a = _as_vector(direction)
    if a.size < 3:
      raise InvalidArgumentError(
          "For the 2D case only a point can be specified, use from_point")
    q = _as_vector(point)
    if a.size != 3 or q.size != 3:
      raise InvalidArgumentError(
          f"Expected 3D direction and point, got {a.size} and {q.size} "
          "elements")

    w = _unit(a)
    v = -np.cross(w, q)
    if pitch is not None:
      v = v + pitch * w
    return cls(v, w)

  @classmethod
  def from_translation(cls, direction: Vector) -> "Twist":
    """Returns the unit-rate translation along `direction` (2D or 3D)."""
    a = _as_vector(direction)
    if a.size == 2:
      w = 0.
    elif a.size == 3:
      w = np.zeros(3)
    else:
      raise InvalidArgumentError(
          f"Expected a 2D or 3D direction, got {a.size} elements")
    return cls(_unit(a), w)

  from_prismatic = from_translation

  @classmethod
  def from_descriptor(cls, mode: Text, *args) -> "Twist":
    """Returns a twist from a mode tag and its geometric arguments.

    Modes (case-insensitive):
      'R', point: SE(2) rotation about a 2D point.
      'R', direction, point[, pitch]: SE(3) rotation about an axis.
      'T' or 'P', direction: translation along a 2D or 3D direction.

    Raises:
      InvalidArgumentError: For unknown modes or wrong argument counts.
    """
    if not isinstance(mode, str):
      raise InvalidArgumentError(f"Mode should be a string, got {mode!r}")

    mode = mode.upper()
    if mode == "R":
      if len(args) == 1:
        return cls.from_point(args[0])
      elif len(args) in (2, 3):
        return cls.from_axis_point(*args)
      raise InvalidArgumentError(
          f"Rotation takes 1 to 3 arguments, got {len(args)}")
    elif mode in ("T", "P"):
      if len(args) != 1:
        raise InvalidArgumentError(
            f"Translation takes 1 argument, got {len(args)}")
      return cls.from_translation(args[0])
    raise InvalidArgumentError(f"Unknown twist mode {mode!r}")

  @classmethod
  def create(cls, arg, *args) -> "Twist":
    """Returns a twist, choosing the construction from the arguments.

    Args:
      arg: One of
        - a mode tag, with the geometric arguments in `args` (see
          `from_descriptor`);
        - a square matrix: a homogeneous transform if its bottom-right element
          is 1, else an augmented skew-symmetric matrix;
        - a vector of twist coordinates.
      *args: Arguments for a mode tag.

    Raises:
      InvalidArgumentError: If the arguments match no construction.
    """
    if isinstance(arg, str):
      logging.debug("Building twist from descriptor %r", arg)
      return cls.from_descriptor(arg, *args)
    if args:
      raise InvalidArgumentError(
          "Extra arguments are only accepted after a mode tag")

    arr = np.asarray(arg, dtype=np.float64)
    if arr.ndim == 2 and arr.shape[0] == arr.shape[1] and arr.shape[0] > 1:
      if arr[-1, -1] == 1:
        logging.debug("Building twist from a %dx%d transform", *arr.shape)
        return cls.from_transform(arr)
      logging.debug("Building twist from a %dx%d algebra matrix", *arr.shape)
      return cls.from_algebra_matrix(arr)
    return cls.from_coordinates(arr)

  def __repr__(self) -> Text:
    return "Twist(v={}, w={})".format(self.v, self.w)

  def __str__(self) -> Text:
    return "( {}; {} )".format(
        _format_elements(self._v), _format_elements(self._w))

  def __eq__(self, other):
    if isinstance(other, Twist):
      return self.dims == other.dims and np.allclose(self.s(), other.s())
    else:
      return NotImplemented

  def __hash__(self):
    return hash(tuple([type(self)] + self.s().tolist()))

  def __add__(self, other):
    if not isinstance(other, Twist):
      raise InvalidOperandError(
          f"Cannot add {type(other).__name__} to a Twist")
    if other.dims != self.dims:
      raise InvalidOperandError("Cannot add SE(2) and SE(3) twists")
    return type(self).from_coordinates(self.s() + other.s())

  def __radd__(self, other_lhs):
    raise InvalidOperandError(
        f"Cannot add a Twist to {type(other_lhs).__name__}")

  def __mul__(self, other):
    if isinstance(other, bool) or not isinstance(other, numbers.Real):
      raise InvalidOperandError(
          f"A Twist can only be scaled by a real number, not "
          f"{type(other).__name__}")
    return type(self).from_coordinates(self.s() * other)

  def __rmul__(self, other_lhs):
    return self.__mul__(other_lhs)

  @property
  def v(self) -> np.ndarray:
    """Moment part, 2-vector or 3-vector."""
    return self._v

  @property
  def w(self) -> Union[float, np.ndarray]:
    """Angular part, a float for SE(2) or a 3-vector for SE(3)."""
    return self._w

  @property
  def dims(self) -> int:
    """2 for a twist in se(2), 3 for se(3)."""
    return self._v.size

  def s(self) -> np.ndarray:
    """Returns the twist coordinates (v, w), 3 or 6 elements."""
    return np.hstack([self._v, self._w])

  def S(self) -> np.ndarray:  # pylint: disable=invalid-name
    """Returns the augmented skew-symmetric matrix, 3x3 or 4x4."""
    return tr.rmat_pos_to_hmat(tr.skew(self._w), self._v, bottom=0.)

  def expm(self, theta: Optional[float] = None) -> np.ndarray:
    """Returns the homogeneous transform generated by the twist.

    Args:
      theta: If provided, the rotation about the screw axis.  The angular part
        must then be unit length (or zero, in which case theta is the distance
        travelled along a unit `v`).  If None, the rotation is the magnitude of
        `w`.

    Returns:
      A 3x3 (SE(2)) or 4x4 (SE(3)) homogeneous transform.
    """
    if self.dims == 2:
      return tr.hmat_exp_2d(self.S(), theta)
    return tr.hmat_exp(self.S(), theta)

  # pylint: disable-next=invalid-name
  def T(self, theta: Optional[float] = None) -> np.ndarray:
    """Same as `expm`."""
    return self.expm(theta)

  def theta(self) -> float:
    """Returns the rotation magnitude, zero for a pure translation."""
    if self.dims == 2:
      return abs(self._w)
    return float(np.linalg.norm(self._w))

  def pitch(self) -> float:
    """Returns translation along the axis per radian, 0. for SE(2)."""
    if self.dims == 2:
      return 0.
    return float(self._w.dot(self._v))

  def point(self) -> np.ndarray:
    """Returns a point on the screw axis.

    Raises:
      DegenerateAxisError: For a pure translation, whose axis is at infinity.
    """
    theta = self.theta()
    if theta < _TOL:
      raise DegenerateAxisError(
          "A pure translation has no axis point, it lies at infinity")

    if self.dims == 2:
      v = np.append(self._v, 0.)
      w = np.array([0., 0., self._w])
      return (np.cross(w, v) / theta)[0:2]
    return np.cross(self._w, self._v) / theta

  def line(self) -> plucker.PluckerLine:
    """Returns the screw axis as a Plucker line.

    Raises:
      InvalidArgumentError: For an SE(2) twist.
      DegenerateAxisError: For a pure translation.
    """
    if self.dims != 3:
      raise InvalidArgumentError("Only SE(3) twists have a Plucker line")
    if self.theta() < _TOL:
      raise DegenerateAxisError("A pure translation has no axis line")
    return plucker.PluckerLine.from_direction_moment(
        self._w, -self._v - self.pitch() * self._w)


def twists_to_str(twists: Iterable[Twist]) -> Text:
  """Returns one line per twist, in order, as formatted by `str`."""
  return "\n".join(str(tw) for tw in twists)
