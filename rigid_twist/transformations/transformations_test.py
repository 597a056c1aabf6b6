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

"""Tests for transformations."""

from absl.testing import absltest
from absl.testing import parameterized
from rigid_twist.transformations import transformations
import numpy as np
import scipy.linalg

_NUM_RANDOM_SAMPLES = 100
_ATOL = 1e-9


def _hmat(pos, axisangle):
  rmat = transformations.axisangle_to_rmat(np.asarray(axisangle, dtype=float))
  return transformations.rmat_pos_to_hmat(rmat, pos)


class TransformationsTest(parameterized.TestCase):

  def __init__(self, *args, **kwargs):
    super().__init__(*args, **kwargs)
    self._random_state = np.random.RandomState(0)

  @parameterized.parameters(
      {'a': [1, 2, 3], 'b': [0, 1, 0]},
      {'a': [0, 1, 2], 'b': [-2, 1, 0]}
  )
  def test_cross_product(self, a, b):
    npver = np.cross(a, b)
    matver = transformations.cross_mat_from_vec3(a).dot(b)
    np.testing.assert_allclose(npver, matver)

  @parameterized.parameters(
      {'w': 0.5},
      {'w': -2.},
      {'w': [1., -2., 3.]},
      {'w': [0., 0., 0.]},
  )
  def test_skew_vex_inverse(self, w):
    mat = transformations.skew(w)
    np.testing.assert_allclose(mat, -mat.T)
    np.testing.assert_allclose(transformations.vex(mat), w)

  def test_skew_2d_shape(self):
    np.testing.assert_allclose(transformations.skew(3.), [[0., -3.], [3., 0.]])

  def test_vex_ignores_symmetric_part(self):
    w = np.array([0.1, -0.2, 0.3])
    noisy = transformations.skew(w) + 1e-3 * np.eye(3)
    np.testing.assert_allclose(transformations.vex(noisy), w)

  @parameterized.parameters(
      {'value': [1., 2.]},
      {'value': np.zeros((2, 3))},
  )
  def test_skew_vex_reject_bad_sizes(self, value):
    with self.assertRaises(ValueError):
      transformations.skew(value)
    with self.assertRaises(ValueError):
      transformations.vex(np.zeros((4, 4)))

  def test_unit_vector(self):
    np.testing.assert_allclose(
        transformations.unit_vector([3., 0., 4.]), [0.6, 0., 0.8])
    with self.assertRaises(ValueError):
      transformations.unit_vector([0., 0., 0.])

  def test_hmat_split_and_assemble(self):
    hmat = _hmat([1., 2., 3.], [0.1, 0.2, 0.3])
    rmat, pos = transformations.hmat_to_rmat_pos(hmat)
    self.assertEqual(rmat.shape, (3, 3))
    np.testing.assert_allclose(pos, [1., 2., 3.])
    np.testing.assert_allclose(
        transformations.rmat_pos_to_hmat(rmat, pos), hmat)

    algebra = transformations.rmat_pos_to_hmat(np.zeros((2, 2)), [1., 2.],
                                               bottom=0.)
    np.testing.assert_allclose(algebra[2], [0., 0., 0.])

  @parameterized.parameters(
      {'axisangle': [0., 0., 0.]},
      {'axisangle': [np.pi, 0., 0.]},
      {'axisangle': [0., -np.pi, 0.]},
      {'axisangle': [0., np.pi / 2, 0.]},
      {'axisangle': [0.3, -0.2, 0.5]},
      {'axisangle': [np.pi / np.sqrt(3)] * 3},
  )
  def test_rmat_axis_angle_conversion_special(self, axisangle):
    # Test for special values that often cause numerical issues.
    forward = transformations.axisangle_to_rmat(np.array(axisangle))
    w = transformations.rmat_to_axisangle(forward)
    backward = transformations.axisangle_to_rmat(w)
    np.testing.assert_allclose(forward, backward, atol=_ATOL)
    np.testing.assert_allclose(
        np.linalg.norm(w), np.linalg.norm(axisangle), atol=_ATOL)

  def test_rmat_axis_angle_keeps_sign_near_pi(self):
    axisangle = np.array([0., 0., np.pi - 1e-7])
    w = transformations.rmat_to_axisangle(
        transformations.axisangle_to_rmat(axisangle))
    np.testing.assert_allclose(w, axisangle, atol=1e-6)

  @parameterized.parameters(
      {'pos': (0, 0, 0), 'rot': (0, 0, 0)},
      {'pos': (1, 2, 3), 'rot': (0, 0, 0)},
      {'pos': (1, 2, 3), 'rot': (np.pi, 0., 0.)},
      {'pos': (1, -2, 0.5), 'rot': (0.3, -0.4, 1.2)},
      {'pos': (-1, -2, -3), 'rot': (0., 0., -2.5)},
      {'pos': (1, 2, 3), 'rot': (np.pi / np.sqrt(3),) * 3},
  )
  def test_hmat_log_exp_conversion(self, pos, rot):
    ht = _hmat(pos, rot)

    log = transformations.hmat_log(ht)
    self.assertEqual(log.shape, (4, 4))
    np.testing.assert_allclose(log[3], np.zeros(4))
    np.testing.assert_allclose(log[0:3, 0:3], -log[0:3, 0:3].T, atol=_ATOL)

    np.testing.assert_allclose(transformations.hmat_exp(log), ht, atol=_ATOL)

    xi = transformations.hmat_to_twist(ht)
    np.testing.assert_allclose(transformations.twist_to_hmat(xi), ht,
                               atol=_ATOL)

  def test_hmat_log_exp_conversion_random(self):
    for _ in range(_NUM_RANDOM_SAMPLES):
      axis = transformations.unit_vector(self._random_state.randn(3))
      angle = self._random_state.uniform(0., np.pi * 0.99)
      ht = _hmat(self._random_state.randn(3), axis * angle)
      ht2 = transformations.hmat_exp(transformations.hmat_log(ht))
      np.testing.assert_allclose(ht, ht2, atol=_ATOL)

  def test_hmat_log_exp_conversion_half_turn_random(self):
    for _ in range(_NUM_RANDOM_SAMPLES):
      axis = transformations.unit_vector(self._random_state.randn(3))
      ht = _hmat(self._random_state.randn(3), axis * np.pi)
      xi = transformations.hmat_to_twist(ht)
      self.assertAlmostEqual(np.linalg.norm(xi[3:6]), np.pi, places=12)
      np.testing.assert_allclose(transformations.twist_to_hmat(xi), ht,
                                 atol=_ATOL)

  def test_hmat_to_twist_known_values(self):
    translation = transformations.rmat_pos_to_hmat(np.eye(3), [1., 2., 3.])
    np.testing.assert_allclose(
        transformations.hmat_to_twist(translation), [1., 2., 3., 0., 0., 0.])

    quarter_turn = _hmat([0., 0., 0.], [0., 0., np.pi / 2])
    np.testing.assert_allclose(
        transformations.hmat_to_twist(quarter_turn),
        [0., 0., 0., 0., 0., np.pi / 2], atol=_ATOL)

  def test_hmat_log_rejects_bad_shape(self):
    with self.assertRaises(ValueError):
      transformations.hmat_log(np.eye(3))

  @parameterized.parameters(
      {'xi': [0., 0., 0., 0., 0., 0.]},
      {'xi': [1., 2., 3., 0., 0., 0.]},
      {'xi': [0.5, -1., 0.2, 0.1, 0.7, -0.3]},
      {'xi': [0., 1., 0., 0., 0., 2.]},
  )
  def test_hmat_exp_matches_matrix_exponential(self, xi):
    xi = np.array(xi)
    algebra = transformations.rmat_pos_to_hmat(
        transformations.skew(xi[3:6]), xi[0:3], bottom=0.)
    expected = scipy.linalg.expm(algebra)
    np.testing.assert_allclose(transformations.hmat_exp(algebra), expected,
                               atol=_ATOL)
    np.testing.assert_allclose(transformations.hmat_exp(xi), expected,
                               atol=_ATOL)

  @parameterized.parameters(
      {'xi': [0.2, -0.1, 0.4, 0., 0., 1.]},
      {'xi': [1., 0., 0., 0., 0., 0.]},
  )
  def test_se3_integration(self, xi):
    # Rotating through theta about a unit screw axis is the same as applying
    # the unit displacement theta times.
    n = 3
    xi = np.array(xi)
    ht = transformations.hmat_exp(xi)
    np.testing.assert_allclose(
        np.linalg.matrix_power(ht, n),
        transformations.hmat_exp(xi, theta=float(n)), atol=_ATOL)

  def test_hmat_exp_rejects_bad_shape(self):
    with self.assertRaises(ValueError):
      transformations.hmat_exp(np.zeros(5))

  @parameterized.parameters(
      {'state': [0, 0, 0]},
      {'state': [1.0, 2.0, np.radians(60)]}
  )
  def test_homogeneous_conversion_2d_special(self, state):
    # Test for special values that often cause numerical issues.
    x = np.array(state)
    ht = transformations.postheta_to_matrix_2d(x)
    x2 = transformations.matrix_to_postheta_2d(ht)
    np.testing.assert_allclose(x, x2)

  @parameterized.parameters(
      {'xi': [0., 0., 0.]},
      {'xi': [1., 2., 0.]},
      {'xi': [0.5, -1., 0.8]},
      {'xi': [-0.3, 0.2, -2.]},
  )
  def test_hmat_exp_2d_matches_matrix_exponential(self, xi):
    xi = np.array(xi)
    algebra = transformations.rmat_pos_to_hmat(
        transformations.skew(xi[2]), xi[0:2], bottom=0.)
    expected = scipy.linalg.expm(algebra)
    np.testing.assert_allclose(transformations.hmat_exp_2d(algebra), expected,
                               atol=_ATOL)
    np.testing.assert_allclose(transformations.hmat_exp_2d(xi), expected,
                               atol=_ATOL)

  def test_hmat_exp_2d_pure_rotation(self):
    ht = transformations.hmat_exp_2d([0., 0., 1.], theta=np.pi / 2)
    np.testing.assert_allclose(
        ht, transformations.postheta_to_matrix_2d([0., 0., np.pi / 2]),
        atol=_ATOL)

  @parameterized.parameters(
      {'state': [0., 0., 0.]},
      {'state': [1., 2., 0.]},
      {'state': [1., 2., np.radians(60)]},
      {'state': [-1., 0.5, np.radians(-120)]},
      {'state': [1., 2., np.pi]},
      {'state': [1., 2., -np.pi]},
      {'state': [0.5, -1., np.pi - 1e-9]},
  )
  def test_hmat_log_exp_conversion_2d(self, state):
    ht = transformations.postheta_to_matrix_2d(np.array(state))
    log = transformations.hmat_log_2d(ht)
    self.assertEqual(log.shape, (3, 3))
    self.assertFalse(np.iscomplexobj(log))
    np.testing.assert_allclose(transformations.vex(log[0:2, 0:2]), state[2],
                               atol=_ATOL)
    np.testing.assert_allclose(transformations.hmat_exp_2d(log), ht,
                               atol=_ATOL)

  def test_hmat_log_2d_rejects_bad_shape(self):
    with self.assertRaises(ValueError):
      transformations.hmat_log_2d(np.eye(4))


if __name__ == '__main__':
  absltest.main()
