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

"""Type alias definitions for rigid_twist.transformations."""
from typing import Any

# pylint:disable=g-import-not-at-top
try:
  # This is only available for NumPy >= 1.20.
  import numpy.typing
  ArrayLike = numpy.typing.ArrayLike
except ImportError:
  ArrayLike = Any

AxisAngleArray = ArrayLike  # [3] axis-angle rotation
PositionArray = ArrayLike  # [3] or [2] position or direction vector
RotationMatrix = ArrayLike  # [3,3] rotation matrix
RotationMatrix2d = ArrayLike  # [2,2] rotation matrix
SkewMatrix = ArrayLike  # [3,3] or [2,2] skew-symmetric matrix
HomogeneousMatrix = ArrayLike  # [4,4] homogeneous transformation matrix
HomogeneousMatrix2d = ArrayLike  # [3,3] homogeneous matrix
AlgebraMatrix = ArrayLike  # [4,4] augmented skew-symmetric matrix in se(3)
AlgebraMatrix2d = ArrayLike  # [3,3] augmented skew-symmetric matrix in se(2)
Twist = ArrayLike  # [6] twist coordinates (v, w)
