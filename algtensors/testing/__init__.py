"""Tools for testing."""
# Copyright (C) TeNPy Developers, Apache license
from . import random_generation
from .asserting import assert_same_spaces, assert_tensors_almost_equal
from .random_generation import random_block, random_spaces, random_tensor
