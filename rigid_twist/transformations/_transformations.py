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

"""Exponential coordinates for SE(2) and SE(3), and the helpers they need."""
from typing import Optional, Tuple
from absl import logging
from rigid_twist.transformations import _types as types
import numpy as np
import scipy.linalg

_TOL = 1e-10
# Rotations closer than this to pi recover their axis from the symmetric part.
_PI_LIMIT = 1e-6
# Imaginary parts of a matrix logarithm below this are round-off.
_LOGM_IMAG_TOL = 1e-8
# SE(2) rotations closer than this to a half turn skip the generic logarithm.
_LOGM_BRANCH_LIMIT = 1e-2


def cross_mat_from_vec3(v):
  """Returns the skew-symmetric matrix cross-product operator.

  Args:
      v: A 3x1 vector.

  Returns:
      A matrix cross-product operator P (3x3) for the vector v = [x,y,z]^T,
      such that  v x b = Pb for any 3-vector b
  """
  x, y, z = v[0], v[1], v[2]
  return np.array([[0, -z, y],
                   [z, 0, -x],
                   [-y, x, 0]], dtype=np.float64)


def skew(w) -> types.SkewMatrix:
  """Returns the skew-symmetric matrix of a 2D rate or a 3D vector.

  Args:
    w: A scalar (rotation rate about the out-of-plane axis) or a 3-vector.

  Returns:
    A 2x2 matrix for a scalar, a 3x3 cross-product operator for a 3-vector.

  Raises:
    ValueError: If `w` has neither 1 nor 3 elements.
  """
  w = np.asarray(w, dtype=np.float64).ravel()
  if w.size == 1:
    return np.array([[0., -w[0]],
                     [w[0], 0.]])
  elif w.size == 3:
    return cross_mat_from_vec3(w)
  raise ValueError('Expected a scalar or a 3-vector, got {} elements'.format(
      w.size))


def vex(mat: types.SkewMatrix):
  """Returns the vector of a skew-symmetric matrix, the inverse of `skew`.

  Only the antisymmetric part of `mat` is used, so matrices that are skew up to
  numerical noise (e.g. the output of a matrix logarithm) are accepted.

  Args:
    mat: A 2x2 or 3x3 matrix.

  Returns:
    A float for a 2x2 matrix, a 3-vector for a 3x3 matrix.

  Raises:
    ValueError: If `mat` is not 2x2 or 3x3.
  """
  mat = np.asarray(mat, dtype=np.float64)
  if mat.shape == (2, 2):
    return float(0.5 * (mat[1, 0] - mat[0, 1]))
  elif mat.shape == (3, 3):
    return 0.5 * np.array([mat[2, 1] - mat[1, 2],
                           mat[0, 2] - mat[2, 0],
                           mat[1, 0] - mat[0, 1]])
  raise ValueError('Expected a 2x2 or 3x3 matrix, got shape {}'.format(
      mat.shape))


def unit_vector(v: types.PositionArray) -> np.ndarray:
  """Returns `v` scaled to unit length.

  Raises:
    ValueError: If `v` has zero length.
  """
  v = np.asarray(v, dtype=np.float64).ravel()
  norm = np.linalg.norm(v)
  if norm < _TOL:
    raise ValueError('Cannot normalize a zero-length vector {}'.format(v))
  return v / norm


def hmat_to_rmat_pos(
    hmat: types.HomogeneousMatrix) -> Tuple[np.ndarray, np.ndarray]:
  """Splits a homogeneous or augmented matrix into its blocks.

  Args:
    hmat: A square NxN matrix, e.g. a 4x4 homogeneous transform or a 4x4
      augmented skew-symmetric matrix.

  Returns:
    A tuple of the (N-1)x(N-1) top-left block and the (N-1)-vector formed by
    the last column without its bottom element.
  """
  hmat = np.asarray(hmat, dtype=np.float64)
  if hmat.ndim != 2 or hmat.shape[0] != hmat.shape[1] or hmat.shape[0] < 2:
    raise ValueError('Expected a square matrix, got shape {}'.format(
            hmat.shape))
  return hmat[:-1, :-1].copy(), hmat[:-1, -1].copy()


def rmat_pos_to_hmat(rmat: np.ndarray, pos: types.PositionArray,
                     bottom: float = 1.) -> np.ndarray:
  """Assembles a square matrix from a top-left block and a last column.

  Args:
    rmat: The (N-1)x(N-1) top-left block.
    pos: The (N-1)-vector placed in the last column.
    bottom: The bottom-right element; 1 for a homogeneous transform, 0 for an
      augmented skew-symmetric matrix.

  Returns:
    An NxN matrix whose bottom row is zero apart from `bottom`.
  """
  pos = np.asarray(pos, dtype=np.float64).ravel()
  n = pos.size + 1
  hmat = np.zeros((n, n))
  hmat[:-1, :-1] = rmat
  hmat[:-1, -1] = pos
  hmat[-1, -1] = bottom
  return hmat


def axisangle_to_rmat(axisangle: types.AxisAngleArray) -> types.RotationMatrix:
  """Returns rotation matrix corresponding to the exponential coordinates.

  See Murray1994: A Mathematical Introduction to Robotic Manipulation

  Args:
      axisangle: A 3x1 numpy array describing the axis of rotation, with angle
        encoded by its length.

  Returns:
      R: a 3x3 numpy array describing the rotation
  """
  theta = np.linalg.norm(axisangle)
  if np.allclose(theta, 0):
    s_theta = cross_mat_from_vec3(axisangle)
    return np.eye(3) + s_theta + s_theta.dot(s_theta) * 0.5
  else:
    wn = axisangle / theta
    s = cross_mat_from_vec3(wn)
    return np.eye(3) + s * np.sin(theta) + s.dot(s) * (1-np.cos(theta))


def rmat_to_axisangle(rmat: types.RotationMatrix) -> types.AxisAngleArray:
  """Returns exponential coordinates (w * theta) for the given rotation matrix.

  See Murray1994: A Mathematical Introduction to Robotic Manipulation

  Args:
      rmat: a 3x3 numpy array describing the rotation.

  Returns:
    A 3D numpy unit-vector describing the axis of rotation, scaled by the angle
    required to rotate about this axis to achieve `rmat`.
  """
  # Twice the antisymmetric part is 2 * sin(theta) * w, and the trace is
  # 1 + 2 * cos(theta).
  w_sin = vex(rmat) * 2.
  theta = np.arctan2(np.linalg.norm(w_sin), np.trace(rmat) - 1.)

  if np.allclose(theta, 0):
    return np.zeros(3)

  if np.pi - theta > _PI_LIMIT:
    return w_sin / np.linalg.norm(w_sin) * theta

  # Near pi sin(theta) vanishes. The symmetric part is
  # cos(theta) * I + (1 - cos(theta)) * w w^T, so read w from its largest
  # diagonal entry and take the sign from whatever antisymmetric part is left.
  logging.log_every_n_seconds(
      logging.WARNING, 'Rotation angle %f is close to pi', 60, theta)
  ct = np.cos(theta)
  wwt = (0.5 * (rmat + rmat.T) - ct * np.eye(3)) / (1. - ct)
  i = np.argmax(np.diag(wwt))
  w = wwt[:, i] / np.sqrt(wwt[i, i])
  if w.dot(w_sin) < 0:
    w = -w
  return w / np.linalg.norm(w) * theta


def hmat_to_twist(ht: types.HomogeneousMatrix) -> types.Twist:
  """Returns the exponential coordinates for the homogeneous transform H.

  Uses the closed form of the SE(3) logarithm, see
  Lynch & Park 2017: Modern Robotics: Mechanics, Planning, and Control

  Args:
      ht: A 4x4 numpy array containing a homogeneous transform.

  Returns:
    A 6-vector (v, w) representing the instantaneous velocity and normalized
    axis of rotation, scaled by the magnitude of the twist.  Intuitively, if
    this twist is integrated for unit time (by `twist_to_hmat`) it will recover
    `ht`.
  """
  rmat, pos = hmat_to_rmat_pos(ht)
  if rmat.shape != (3, 3):
    raise ValueError(
        'Expected a 4x4 homogeneous transform, got shape {}'.format(
            np.shape(ht)))

  w = rmat_to_axisangle(rmat)
  theta = np.linalg.norm(w)
  if np.allclose(theta, 0):
    return np.hstack([pos, np.zeros(3)])

  s = cross_mat_from_vec3(w / theta)
  g_inv = (np.eye(3) / theta - 0.5 * s +
           (1. / theta - 0.5 / np.tan(theta / 2.)) * s.dot(s))
  v = g_inv.dot(pos) * theta
  return np.hstack([v, w])


def twist_to_hmat(xi: types.Twist) -> types.HomogeneousMatrix:
  """Returns homogeneous transform from exponential coordinates xi=[v, w].

  The magnitude of the angle is encoded in the length of w if w is nonzero, else
  in the magnitude of v.
  See Murray 1994: A Mathematical Introduction to Robotic Manipulation or
  Lynch & Park 2017: Modern Robotics: Mechanics, Planning, and Control

  Args:
      xi: A 6-vector containing:
          v - 3-vector representing the instantaneous velocity.
          w - 3-vector representing the axis of rotation.
          Scaled by the magnitude of the rotation.

  Returns:
      H: A 4x4 numpy array containing a homogeneous transform.
  """
  xi = np.asarray(xi, dtype=np.float64)
  v = xi[0:3]
  w = xi[3:6]

  if np.allclose(w, 0):
    r = np.eye(3)
    p = v  # assume already scaled by theta
  else:
    theta = np.linalg.norm(w)
    wn = w / theta
    vn = v / theta
    s = cross_mat_from_vec3(wn)
    r = axisangle_to_rmat(w)
    p = (np.eye(3) - r).dot(s.dot(vn)) + wn * (wn.dot(vn)) * theta

  return rmat_pos_to_hmat(r, p)


def hmat_log(hmat: types.HomogeneousMatrix) -> types.AlgebraMatrix:
  """Returns the closed-form SE(3) logarithm of a homogeneous transform.

  Args:
    hmat: A 4x4 homogeneous transform.

  Returns:
    The 4x4 augmented skew-symmetric matrix [[skew(w), v], [0, 0]] whose
    exponential is `hmat`.
  """
  xi = hmat_to_twist(hmat)
  return rmat_pos_to_hmat(skew(xi[3:6]), xi[0:3], bottom=0.)


def _hmat_log_2d_closed_form(
    hmat: types.HomogeneousMatrix2d) -> types.AlgebraMatrix2d:
  """Principal SE(2) logarithm, valid up to and including a half turn."""
  rmat, pos = hmat_to_rmat_pos(hmat)
  w = np.arctan2(rmat[1, 0], rmat[0, 0])
  if np.allclose(w, 0):
    v = pos
  else:
    # Inverse of the velocity-to-translation map used by `hmat_exp_2d`.
    half_cot = 0.5 * w / np.tan(w / 2.)
    v = np.array([[half_cot, 0.5 * w],
                  [-0.5 * w, half_cot]]).dot(pos)
  return rmat_pos_to_hmat(skew(w), v, bottom=0.)


def hmat_log_2d(hmat: types.HomogeneousMatrix2d) -> types.AlgebraMatrix2d:
  """Returns the SE(2) logarithm of a 3x3 homogeneous transform.

  This uses the generic matrix logarithm. Close to a half turn the generic
  logarithm loses accuracy, and at a half turn its principal value is complex,
  so there the closed form is used instead.

  Args:
    hmat: A 3x3 homogeneous transform.

  Returns:
    The 3x3 augmented skew-symmetric matrix whose exponential is `hmat`, with
    the rotation angle in [-pi, pi].
  """
  hmat = np.asarray(hmat, dtype=np.float64)
  if hmat.shape != (3, 3):
    raise ValueError(
        'Expected a 3x3 homogeneous transform, got shape {}'.format(
            hmat.shape))

  angle = np.arctan2(hmat[1, 0], hmat[0, 0])
  if np.pi - np.abs(angle) < _LOGM_BRANCH_LIMIT:
    return _hmat_log_2d_closed_form(hmat)

  log = scipy.linalg.logm(hmat)
  if np.iscomplexobj(log):
    max_imag = np.max(np.abs(log.imag))
    if max_imag > _LOGM_IMAG_TOL:
      logging.warning(
          'Matrix logarithm has an imaginary part of %g, using the closed form',
          max_imag)
      return _hmat_log_2d_closed_form(hmat)
    log = log.real
  return log


def hmat_exp(xi, theta: Optional[float] = None) -> types.HomogeneousMatrix:
  """Returns the SE(3) exponential of a twist.

  Args:
    xi: A 4x4 augmented skew-symmetric matrix or a 6-vector (v, w).
    theta: If provided, `xi` is scaled by theta before exponentiating.  For this
      to be a rotation of theta about the screw axis, w must be unit length (or
      zero for a pure translation); no renormalization is done.

  Returns:
    A 4x4 homogeneous transform.
  """
  xi = np.asarray(xi, dtype=np.float64)
  if xi.shape == (4, 4):
    skw, v = hmat_to_rmat_pos(xi)
    twist = np.hstack([v, vex(skw)])
  elif xi.shape == (6,):
    twist = xi
  else:
    raise ValueError('Expected a 4x4 matrix or a 6-vector, got shape {}'.format(
        xi.shape))

  if theta is not None:
    twist = twist * theta
  return twist_to_hmat(twist)


def hmat_exp_2d(xi, theta: Optional[float] = None) -> types.HomogeneousMatrix2d:
  """Returns the closed-form SE(2) exponential of a twist.

  Args:
    xi: A 3x3 augmented skew-symmetric matrix or a 3-vector (vx, vy, w).
    theta: If provided, `xi` is scaled by theta before exponentiating.

  Returns:
    A 3x3 homogeneous transform.
  """
  xi = np.asarray(xi, dtype=np.float64)
  if xi.shape == (3, 3):
    skw, v = hmat_to_rmat_pos(xi)
    w = vex(skw)
  elif xi.shape == (3,):
    v, w = xi[0:2], xi[2]
  else:
    raise ValueError('Expected a 3x3 matrix or a 3-vector, got shape {}'.format(
        xi.shape))

  if theta is not None:
    v = v * theta
    w = w * theta

  if np.allclose(w, 0):
    return rmat_pos_to_hmat(np.eye(2), v)

  st = np.sin(w)
  ct = np.cos(w)
  # Maps the velocity to the translation; sin(w)/w and (1-cos(w))/w keep the
  # sign of w right for clockwise rotations.
  vmat = np.array([[st, -(1. - ct)],
                   [1. - ct, st]]) / w
  return rmat_pos_to_hmat(rotation_matrix_2d(w), vmat.dot(v))


################
# 2D Functions #
################


def postheta_to_matrix_2d(pose: np.ndarray) -> types.HomogeneousMatrix2d:
  """Converts 2D pose vector (x, y, theta) to 2D homogeneous transform matrix.

  Args:
    pose: (np.array) Pose vector with x,y,theta elements.

  Returns:
    A 3x3 transform matrix.
  """
  return rmat_pos_to_hmat(rotation_matrix_2d(pose[2]), pose[0:2])


def matrix_to_postheta_2d(mat: types.HomogeneousMatrix2d) -> np.ndarray:
  """Converts 2D homogeneous transform matrix to a 2D pose vector (x, y, theta).

  Args:
    mat: (np.array) 3x3 transform matrix.

  Returns:
    An x,y,theta 2D pose.
  """
  return np.array([mat[0, 2], mat[1, 2], np.arctan2(mat[1, 0], mat[0, 0])])


def rotation_matrix_2d(theta: float) -> types.RotationMatrix2d:
  ct = np.cos(theta)
  st = np.sin(theta)
  return np.array([
      [ct, -st],
      [st, ct]
  ])
