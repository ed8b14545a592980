"""
Source rewriters.

- script: JavaScript / TypeScript / JSX via tree-sitter
- template: Vue single-file components (template + script blocks)
- formatting: optional prettier pass
"""

from i18n_auto.rewrite.script import ScriptRewriter, rewrite_script
from i18n_auto.rewrite.template import (
    TemplateRewriter,
    rewrite_component,
    rewrite_template,
    split_blocks,
)

__all__ = [
    "ScriptRewriter",
    "rewrite_script",
    "TemplateRewriter",
    "rewrite_template",
    "rewrite_component",
    "split_blocks",
]
