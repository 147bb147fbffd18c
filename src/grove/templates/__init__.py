"""Tree template models, built-in trees and the exchange codec."""

from .builtin import DEFAULT_TREE_NAME, builtin_templates, default_template
from .codec import DecodeResult, decode_template, decode_templates, encode_template, encode_templates
from .models import Cell, Stage, TreeTemplate

__all__ = [
    "Cell",
    "DEFAULT_TREE_NAME",
    "DecodeResult",
    "Stage",
    "TreeTemplate",
    "builtin_templates",
    "decode_template",
    "decode_templates",
    "default_template",
    "encode_template",
    "encode_templates",
]
