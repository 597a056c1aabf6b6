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

"""Twists: exponential coordinates of rigid-body displacements."""

from rigid_twist.geometry.plucker import PluckerLine
from rigid_twist.geometry.twist import DegenerateAxisError
from rigid_twist.geometry.twist import InvalidArgumentError
from rigid_twist.geometry.twist import InvalidOperandError
from rigid_twist.geometry.twist import Twist
from rigid_twist.geometry.twist import twists_to_str
