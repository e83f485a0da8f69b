"""
Component Resolver Indexes

Each index owns one FileCache over the root directory:
- PatternIndex: pattern.json files -> ComponentRecord
- TemplateIndex / SubTemplateIndex: component and element templates
- ExampleIndex: rendered example files
- ReadmeIndex: rendered readme.md files
"""

from .base import FileIndex, select_below, call_renderer
from .pattern import PatternIndex
from .templates import TemplateIndex, SubTemplateIndex, templates_ready
from .examples import ExampleIndex, is_main_example
from .readme import ReadmeIndex

__all__ = [
    'FileIndex',
    'select_below',
    'call_renderer',
    'PatternIndex',
    'TemplateIndex',
    'SubTemplateIndex',
    'templates_ready',
    'ExampleIndex',
    'is_main_example',
    'ReadmeIndex',
]
