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

"""SE(2) and SE(3) exponential and logarithm maps and their helpers."""

# pylint: disable=unused-import
from rigid_twist.transformations._transformations import axisangle_to_rmat
from rigid_twist.transformations._transformations import cross_mat_from_vec3
from rigid_twist.transformations._transformations import hmat_exp
from rigid_twist.transformations._transformations import hmat_exp_2d
from rigid_twist.transformations._transformations import hmat_log
from rigid_twist.transformations._transformations import hmat_log_2d
from rigid_twist.transformations._transformations import hmat_to_rmat_pos
from rigid_twist.transformations._transformations import hmat_to_twist
from rigid_twist.transformations._transformations import matrix_to_postheta_2d
from rigid_twist.transformations._transformations import postheta_to_matrix_2d
from rigid_twist.transformations._transformations import rmat_pos_to_hmat
from rigid_twist.transformations._transformations import rmat_to_axisangle
from rigid_twist.transformations._transformations import rotation_matrix_2d
from rigid_twist.transformations._transformations import skew
from rigid_twist.transformations._transformations import twist_to_hmat
from rigid_twist.transformations._transformations import unit_vector
from rigid_twist.transformations._transformations import vex
