"""
Template rewriting for Vue single-file components.

A component is split into its top-level blocks (``<template>``,
``<script>``, ``<script setup>``, ``<style>``). The template region is
tokenized into tags, attributes, text and ``{{ }}`` interpolations; script
regions are handed to the script rewriter. Every region is rewritten on its
own and the results are spliced back by recorded offsets, back-to-front.

Template extraction sites:
- ``title="欢迎"`` / ``:title="'欢迎'"`` -> ``:title="$t('i18n-auto-...')"``
- text outside interpolations -> ``{{ $t('i18n-auto-...') }}``

Text inside ``{{ }}`` is already dynamic and is never touched. The scanner
tracks two states, outside and inside an interpolation: ``{{`` enters,
the matching ``}}`` leaves, and an unmatched ``{{`` keeps the rest of the
region inside.
"""

from __future__ import annotations

import html
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from i18n_auto.catalog import CatalogStore
from i18n_auto.config import I18nConfig
from i18n_auto.eligibility import is_eligible
from i18n_auto.errors import ParseError
from i18n_auto.keygen import derive_key
from i18n_auto.models import (
    SCRIPT_LANG_KINDS,
    CandidateKind,
    ExtractionCandidate,
    RewriteResult,
)
from i18n_auto.rewrite import script as script_rewriter

logger = logging.getLogger(__name__)

# Top-level blocks; attribute values may contain '>'
BLOCK_RE = re.compile(
    r"<!--.*?-->|<(template|script|style)\b((?:[^>\"']|\"[^\"]*\"|'[^']*')*)>",
    re.S | re.I,
)
TEMPLATE_TAG_RE = re.compile(
    r"<template\b(?:[^>\"']|\"[^\"]*\"|'[^']*')*?(/?)>|</template\s*>",
    re.I,
)
BLOCK_ATTR_RE = re.compile(r"([^\s=/>]+)(?:\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s>]+)))?")

TAG_NAME_RE = re.compile(r"</?([A-Za-z][^\s/>]*)")
ATTR_RE = re.compile(
    r"\s*([^\s\"'>/=]+)(?:\s*=\s*(?:\"([^\"]*)\"|'([^']*)'|([^\s\"'=<>`]+)))?"
)
# A bound value that is nothing but one string literal
JS_STRING_RE = re.compile(r"""^\s*(?:'((?:[^'\\]|\\.)*)'|"((?:[^"\\]|\\.)*)"|`((?:[^`\\$]|\\.|\$(?!\{))*)`)\s*$""", re.S)

DIRECTIVE_PREFIXES = ("v-", "@", "#")
BIND_PREFIXES = (":", "v-bind:")


@dataclass
class Block:
    """A top-level block of a single-file component.

    ``start``/``end`` delimit the block body (between the tags).
    """
    tag: str
    start: int
    end: int
    attrs: dict[str, str] = field(default_factory=dict)

    @property
    def lang(self) -> str:
        return self.attrs.get("lang", "").strip().lower()

    @property
    def is_setup(self) -> bool:
        return "setup" in self.attrs


@dataclass
class Attribute:
    name: str
    start: int
    end: int
    value: Optional[str] = None


def _parse_block_attrs(raw: str) -> dict[str, str]:
    attrs = {}
    for m in BLOCK_ATTR_RE.finditer(raw):
        value = next((g for g in m.groups()[1:] if g is not None), "")
        attrs[m.group(1).lower()] = value
    return attrs


def _template_end(content: str, pos: int) -> int:
    """Offset of the ``</template>`` closing the template opened before ``pos``."""
    depth = 1
    for m in TEMPLATE_TAG_RE.finditer(content, pos):
        if m.group(0).startswith("</"):
            depth -= 1
            if depth == 0:
                return m.start()
        elif not m.group(1):
            depth += 1
    raise ParseError("Unclosed <template> block")


def split_blocks(content: str) -> list[Block]:
    """Find the top-level blocks of a component, in document order.

    Raises:
        ParseError: If a block is not closed
    """
    blocks = []
    pos = 0
    while True:
        m = BLOCK_RE.search(content, pos)
        if m is None:
            return blocks
        if m.group(1) is None:  # comment
            pos = m.end()
            continue

        tag = m.group(1).lower()
        raw_attrs = m.group(2) or ""
        if raw_attrs.rstrip().endswith("/"):
            pos = m.end()
            continue

        start = m.end()
        if tag == "template":
            end = _template_end(content, start)
        else:
            close = re.compile(rf"</{tag}\s*>", re.I).search(content, start)
            if close is None:
                raise ParseError(f"Unclosed <{tag}> block")
            end = close.start()

        blocks.append(Block(tag=tag, start=start, end=end, attrs=_parse_block_attrs(raw_attrs)))
        close_end = content.find(">", end)
        pos = close_end + 1 if close_end != -1 else len(content)


class TemplateRewriter:
    """Collect and apply replacements inside one template region.

    Usage:
        rewriter = TemplateRewriter(config, catalog)
        result = rewriter.rewrite('<div title="欢迎">你好</div>')
    """

    def __init__(self, config: I18nConfig, catalog: CatalogStore):
        self.config = config
        self.catalog = catalog

    def call(self, key: str) -> str:
        return f"{self.config.template_i18n_call}('{key}')"

    def collect(self, markup: str) -> list[ExtractionCandidate]:
        """Scan ``markup`` and return candidates for attributes and text."""
        candidates: list[ExtractionCandidate] = []
        n = len(markup)
        i = 0
        text_start = 0

        def flush(end: int) -> None:
            if end > text_start:
                candidate = self._text_candidate(markup, text_start, end)
                if candidate is not None:
                    candidates.append(candidate)

        while i < n:
            if markup.startswith("{{", i):
                flush(i)
                close = markup.find("}}", i + 2)
                if close == -1:
                    logger.debug("Unmatched '{{' at offset %d; leaving the rest of the template alone", i)
                    text_start = i = n
                    break
                i = text_start = close + 2
                continue

            if markup.startswith("<!--", i):
                flush(i)
                close = markup.find("-->", i + 4)
                i = text_start = n if close == -1 else close + 3
                continue

            if markup[i] == "<" and i + 1 < n and (markup[i + 1].isalpha() or markup[i + 1] == "/"):
                flush(i)
                end, attrs = self._scan_tag(markup, i)
                for attr in attrs:
                    candidate = self._attribute_candidate(attr)
                    if candidate is not None:
                        candidates.append(candidate)
                i = text_start = end
                continue

            i += 1

        flush(n)
        return candidates

    def _scan_tag(self, markup: str, pos: int) -> tuple[int, list[Attribute]]:
        """Tokenize the tag starting at ``pos``.

        Returns:
            Tuple of (offset just past the tag, attributes)
        """
        m = TAG_NAME_RE.match(markup, pos)
        if m is None:
            return pos + 1, []
        if markup.startswith("</", pos):
            close = markup.find(">", m.end())
            return (len(markup) if close == -1 else close + 1), []

        attrs = []
        i = m.end()
        n = len(markup)
        while i < n:
            while i < n and markup[i].isspace():
                i += 1
            if i >= n:
                break
            if markup[i] == ">":
                return i + 1, attrs
            if markup.startswith("/>", i):
                return i + 2, attrs
            if markup[i] == "/":
                i += 1
                continue
            am = ATTR_RE.match(markup, i)
            if am is None or am.end() == i:
                i += 1
                continue
            value = next((g for g in am.groups()[1:] if g is not None), None)
            attrs.append(Attribute(name=am.group(1), start=am.start(1), end=am.end(), value=value))
            i = am.end()
        return n, attrs

    def _attribute_candidate(self, attr: Attribute) -> Optional[ExtractionCandidate]:
        name = attr.name
        if attr.value is None:
            return None

        bound = name.startswith(BIND_PREFIXES)
        if bound:
            base_name = name[1:] if name.startswith(":") else name[len("v-bind:"):]
            m = JS_STRING_RE.match(attr.value)
            if m is None or not base_name:
                return None  # a real expression, not a literal
            raw = next(g for g in m.groups() if g is not None)
            text = script_rewriter.unescape_js(html.unescape(raw)).strip()
        elif name.startswith(DIRECTIVE_PREFIXES):
            return None
        else:
            base_name = name
            text = html.unescape(attr.value).strip()

        if not is_eligible(text, self.config):
            return None

        key = derive_key(text)
        return ExtractionCandidate(
            start=attr.start,
            end=attr.end,
            text=text,
            kind=CandidateKind.ATTRIBUTE,
            key=key,
            replacement=f':{base_name}="{self.call(key)}"',
        )

    def _text_candidate(self, markup: str, start: int, end: int) -> Optional[ExtractionCandidate]:
        raw = markup[start:end]
        stripped = raw.strip()
        if not stripped:
            return None
        text = html.unescape(re.sub(r"\s*\n\s*", " ", stripped))
        if not is_eligible(text, self.config):
            return None
        lead = len(raw) - len(raw.lstrip())
        key = derive_key(text)
        return ExtractionCandidate(
            start=start + lead,
            end=start + lead + len(stripped),
            text=text,
            kind=CandidateKind.TEXT,
            key=key,
            replacement=f"{{{{ {self.call(key)} }}}}",
        )

    def rewrite(self, markup: str) -> RewriteResult:
        candidates = self.collect(markup)
        output = markup
        keys = []
        changes = 0
        floor = len(markup) + 1
        for candidate in sorted(candidates, key=lambda c: c.start, reverse=True):
            if candidate.end > floor:
                continue
            output = output[:candidate.start] + candidate.replacement + output[candidate.end:]
            floor = candidate.start
            self.catalog.record(candidate.key, candidate.text)
            keys.append(candidate.key)
            changes += 1
        return RewriteResult(success=True, changes=changes, content=output, keys=list(reversed(keys)))


def rewrite_template(markup: str, config: I18nConfig, catalog: CatalogStore) -> RewriteResult:
    """Rewrite text and attribute values in a template region."""
    return TemplateRewriter(config, catalog).rewrite(markup)


def rewrite_component(content: str, config: I18nConfig, catalog: CatalogStore) -> RewriteResult:
    """Rewrite a single-file component.

    The template region and each script region are rewritten independently
    and spliced back at their original offsets. At most one i18n import is
    added across the component's script blocks.

    A script block that fails to parse fails the whole component: nothing is
    recorded and the original content is returned.
    """
    try:
        blocks = split_blocks(content)
    except ParseError as e:
        return RewriteResult.failed(content, f"Parse error: {e}")

    scripts = []
    imported = False
    for block in blocks:
        if block.tag != "script" or "src" in block.attrs:
            continue
        kind = SCRIPT_LANG_KINDS.get(block.lang)
        if kind is None:
            logger.info("Skipping <script lang=%r> block", block.lang)
            continue
        try:
            root = script_rewriter.parse(content[block.start:block.end].encode("utf-8"), kind)
        except ParseError as e:
            return RewriteResult.failed(content, f"Parse error in <script{' setup' if block.is_setup else ''}>: {e}")
        imported = imported or script_rewriter.ScriptRewriter(config, catalog).has_i18n_import(root)
        scripts.append((block, kind))

    edits: list[tuple[int, int, str]] = []
    changes = 0
    keys: list[str] = []

    template = next((b for b in blocks if b.tag == "template"), None)
    if template is not None:
        if template.lang not in ("", "html"):
            logger.info("Skipping <template lang=%r> block", template.lang)
        else:
            result = rewrite_template(content[template.start:template.end], config, catalog)
            if result.changes:
                edits.append((template.start, template.end, result.content))
                changes += result.changes
                keys.extend(result.keys)

    # an import already present in any block covers the whole component
    has_import = imported
    for block, kind in scripts:
        result = script_rewriter.rewrite_script(
            content[block.start:block.end], config, kind, catalog, assume_imported=has_import,
        )
        if not result.success:
            return RewriteResult.failed(content, *result.errors)
        if result.changes:
            edits.append((block.start, block.end, result.content))
            changes += result.changes
            keys.extend(result.keys)
        has_import = has_import or result.has_import

    output = content
    for start, end, replacement in sorted(edits, key=lambda e: e[0], reverse=True):
        output = output[:start] + replacement + output[end:]

    return RewriteResult(success=True, changes=changes, content=output, keys=keys, has_import=has_import)
