"""Block-backends implement matrix and array algebra on dense blocks, similar to e.g. numpy"""
# Copyright (C) TeNPy Developers, Apache license

from ._block_backend import Block, BlockBackend
from .backend_factory import get_block_backend
from .numpy import NumpyBlockBackend
