"""Temporary solution for global config options."""
# Copyright (C) TeNPy Developers, Apache license

__all__ = ['printoptions', 'config']


class printoptions:
    """A collection of global config options. The class is used as a namespace"""

    linewidth: int = 100
    indent: int = 2
    precision: int = 8  # #digits
    maxlines_tensors: int = 30
    skip_data: bool = False  # skip Data section in Tensor prints


class config:
    """A collection of global config options. The class is used as a namespace"""
    printoptions = printoptions
    default_block_backend = 'numpy'
    lazy_outer_products = False  # If ``A & B`` should give a TensorProduct instead of a Tensor
