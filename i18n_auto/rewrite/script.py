"""
Script rewriting: replace literal text in JavaScript/TypeScript with calls.

The script is parsed with tree-sitter, every qualifying literal is collected
as an :class:`~i18n_auto.models.ExtractionCandidate`, and the candidates are
then spliced into the source back-to-front (descending start offset), so
offsets collected from the original text stay valid while splicing.

Extraction sites:
- String literals and substitution-free template literals
  -> ``i18n.global.t('i18n-auto-xxxxxxxx')``
- JSX attribute strings -> ``placeholder={i18n.global.t('...')}``
- JSX text -> ``<p>{i18n.global.t('...')}</p>``
- Static parts of template literals with substitutions are recorded in the
  catalog only; the literal itself is left untouched.

Known limitation: template literals with substitutions are not rebuilt
into a call expression, so their static text reaches the catalog but stays
in the source.
"""

from __future__ import annotations

import logging
import re
from typing import Iterator, Optional

import tree_sitter_javascript
import tree_sitter_typescript
from tree_sitter import Language, Node, Parser

from i18n_auto.catalog import CatalogStore
from i18n_auto.config import I18nConfig
from i18n_auto.eligibility import is_eligible
from i18n_auto.errors import ParseError
from i18n_auto.keygen import derive_key
from i18n_auto.models import CandidateKind, ExtractionCandidate, FileKind, RewriteResult
from i18n_auto.rewrite.formatting import format_source

logger = logging.getLogger(__name__)

_PARSERS: dict[FileKind, Parser] = {}

# Ancestors under which a string is a type or a compile-time constant
_TYPE_CONTEXTS = {"literal_type", "enum_body", "enum_assignment"}

# Field names under which a string is a name rather than a value
_NAME_FIELDS = ("key", "name", "source", "property", "index")

_ESCAPE_RE = re.compile(
    r"\\(u\{[0-9a-fA-F]+\}|u[0-9a-fA-F]{4}|x[0-9a-fA-F]{2}|[0-7]{1,3}|\r\n|[\s\S])"
)
_SIMPLE_ESCAPES = {"n": "\n", "t": "\t", "r": "\r", "b": "\b", "f": "\f", "v": "\v"}
_LINE_CONTINUATIONS = {"\n", "\r", "\r\n", "\u2028", "\u2029"}


def get_parser(kind: FileKind) -> Parser:
    """Return a cached tree-sitter parser for ``kind``."""
    if kind not in _PARSERS:
        if kind is FileKind.TSX:
            language = Language(tree_sitter_typescript.language_tsx())
        elif kind is FileKind.TYPESCRIPT:
            language = Language(tree_sitter_typescript.language_typescript())
        else:
            language = Language(tree_sitter_javascript.language())
        _PARSERS[kind] = Parser(language)
    return _PARSERS[kind]


def parse(source: bytes, kind: FileKind) -> Node:
    """Parse ``source`` and return the root node.

    Raises:
        ParseError: If the tree contains syntax errors
    """
    tree = get_parser(kind).parse(source)
    root = tree.root_node
    if root.has_error:
        bad = _first_error(root)
        line = bad.start_point[0] + 1 if bad is not None else 0
        raise ParseError(f"Syntax error near line {line}")
    return root


def _first_error(root: Node) -> Optional[Node]:
    for node in walk(root):
        if node.type == "ERROR" or node.is_missing:
            return node
    return None


def walk(root: Node) -> Iterator[Node]:
    """Pre-order traversal without recursion."""
    stack = [root]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children))


def unescape_js(raw: str) -> str:
    """Cook the raw text of a JS string literal body."""
    if "\\" not in raw:
        return raw

    def repl(m: re.Match) -> str:
        esc = m.group(1)
        if esc.startswith("u{"):
            return chr(int(esc[2:-1], 16))
        if esc[0] == "u" and len(esc) == 5:
            return chr(int(esc[1:], 16))
        if esc[0] == "x" and len(esc) == 3:
            return chr(int(esc[1:], 16))
        if esc in _LINE_CONTINUATIONS:
            return ""
        if esc[0] in "01234567":
            return chr(int(esc, 8))
        return _SIMPLE_ESCAPES.get(esc, esc)

    cooked = _ESCAPE_RE.sub(repl, raw)
    try:
        # Join surrogate pairs written as two \u escapes
        return cooked.encode("utf-16-le", "surrogatepass").decode("utf-16-le")
    except UnicodeDecodeError:
        return cooked


def _text(node: Node) -> str:
    return node.text.decode("utf-8")


def _same(a: Optional[Node], b: Node) -> bool:
    return a is not None and a.start_byte == b.start_byte and a.end_byte == b.end_byte and a.type == b.type


def string_value(node: Node) -> str:
    """Cooked value of a ``string`` node (quotes removed)."""
    return unescape_js(_text(node)[1:-1])


class ScriptRewriter:
    """Collect and apply literal-text replacements for one script.

    Usage:
        rewriter = ScriptRewriter(config, catalog)
        result = rewriter.rewrite(source, FileKind.TYPESCRIPT)
    """

    def __init__(self, config: I18nConfig, catalog: CatalogStore):
        self.config = config
        self.catalog = catalog
        self._wrapper_calls = {
            config.script_i18n_call.strip(),
            config.template_i18n_call.strip(),
        }
        self._wrapper_names = {call.rsplit(".", 1)[-1] for call in self._wrapper_calls if call}

    def call(self, key: str) -> str:
        return f"{self.config.script_i18n_call}('{key}')"

    def has_i18n_import(self, root: Node) -> bool:
        for node in walk(root):
            if node.type == "import_statement":
                source = node.child_by_field_name("source")
                if source is not None and string_value(source) == self.config.i18n_import_path:
                    return True
        return False

    def collect(self, root: Node) -> list[ExtractionCandidate]:
        """Walk the tree and build candidates for every eligible fragment."""
        candidates = []
        for node in walk(root):
            if node.type == "string":
                candidate = self._string_candidate(node)
                if candidate is not None:
                    candidates.append(candidate)
            elif node.type == "template_string":
                candidates.extend(self._template_candidates(node))
            elif node.type == "jsx_text":
                candidate = self._jsx_text_candidate(node)
                if candidate is not None:
                    candidates.append(candidate)
        return candidates

    def _is_name_position(self, node: Node) -> bool:
        parent = node.parent
        if parent is None:
            return False
        return any(_same(parent.child_by_field_name(f), node) for f in _NAME_FIELDS)

    def _in_type_context(self, node: Node) -> bool:
        parent = node.parent
        while parent is not None:
            if parent.type in _TYPE_CONTEXTS:
                return True
            parent = parent.parent
        return False

    def _callee(self, node: Node) -> Optional[Node]:
        """Function node of the call ``node`` is a direct argument of."""
        args = node.parent
        if args is None or args.type != "arguments" or args.parent is None:
            return None
        call = args.parent
        if call.type != "call_expression":
            return None
        return call.child_by_field_name("function")

    def _is_wrapped(self, node: Node) -> bool:
        """Whether ``node`` is already the argument of an i18n call.

        Besides the configured calls themselves, ``this.$t(...)`` and a
        destructured ``t(...)`` count: any callee whose last name is the last
        name of a configured call.
        """
        function = self._callee(node)
        if function is None:
            return False
        if _text(function).replace(" ", "") in self._wrapper_calls:
            return True
        if function.type == "member_expression":
            function = function.child_by_field_name("property")
        return function is not None and _text(function) in self._wrapper_names

    def _is_module_specifier(self, node: Node) -> bool:
        """Whether ``node`` is the path passed to ``require()`` or ``import()``."""
        function = self._callee(node)
        if function is None:
            return False
        return function.type == "import" or _text(function) == "require"

    def _accept(self, start: int, end: int, text: str, kind: CandidateKind, replacement_fmt: Optional[str]) -> ExtractionCandidate:
        key = derive_key(text)
        replacement = replacement_fmt.format(call=self.call(key)) if replacement_fmt else None
        return ExtractionCandidate(start=start, end=end, text=text, kind=kind, key=key, replacement=replacement)

    def _string_candidate(self, node: Node) -> Optional[ExtractionCandidate]:
        parent = node.parent
        if parent is not None and parent.type == "jsx_attribute":
            value = _text(node)[1:-1]
            if not is_eligible(value, self.config):
                return None
            return self._accept(node.start_byte, node.end_byte, value, CandidateKind.JSX_ATTRIBUTE, "{{{call}}}")

        value = string_value(node)
        if not is_eligible(value, self.config):
            return None
        if (
            self._is_name_position(node)
            or self._in_type_context(node)
            or self._is_wrapped(node)
            or self._is_module_specifier(node)
        ):
            logger.debug("Skipping literal %r at byte %d (not a value position)", value, node.start_byte)
            return None
        return self._accept(node.start_byte, node.end_byte, value, CandidateKind.LITERAL, "{call}")

    def _template_candidates(self, node: Node) -> list[ExtractionCandidate]:
        parent = node.parent
        if parent is not None and parent.type == "call_expression" and _same(parent.child_by_field_name("arguments"), node):
            return []  # tagged template

        substitutions = [c for c in node.children if c.type == "template_substitution"]
        if not substitutions:
            value = unescape_js(_text(node)[1:-1])
            if not is_eligible(value, self.config) or self._in_type_context(node):
                return []
            if self._is_wrapped(node) or self._is_module_specifier(node):
                return []
            return [self._accept(node.start_byte, node.end_byte, value, CandidateKind.TEMPLATE_LITERAL, "{call}")]

        candidates = []
        source = node.text
        base = node.start_byte
        cursor = 1  # past the opening backtick
        bounds = [(s.start_byte - base, s.end_byte - base) for s in substitutions]
        bounds.append((len(source) - 1, len(source)))
        for sub_start, sub_end in bounds:
            raw = source[cursor:sub_start].decode("utf-8")
            value = unescape_js(raw).strip()
            if is_eligible(value, self.config):
                candidates.append(
                    self._accept(base + cursor, base + sub_start, value, CandidateKind.TEMPLATE_SEGMENT, None)
                )
            cursor = sub_end
        return candidates

    def _jsx_text_candidate(self, node: Node) -> Optional[ExtractionCandidate]:
        raw = node.text
        stripped = raw.strip()
        if not stripped:
            return None
        value = re.sub(r"\s*\n\s*", " ", stripped.decode("utf-8"))
        if not is_eligible(value, self.config):
            return None
        start = node.start_byte + (len(raw) - len(raw.lstrip()))
        end = start + len(stripped)
        return self._accept(start, end, value, CandidateKind.JSX_TEXT, "{{{call}}}")

    def rewrite(self, content: str, kind: FileKind, assume_imported: bool = False) -> RewriteResult:
        """Rewrite ``content``.

        Args:
            content: Script source
            kind: Grammar to parse with
            assume_imported: Treat the i18n import as present (another script
                block of the same component already has it)

        Returns:
            RewriteResult; on a parse failure the original content with zero
            changes and ``success=False``
        """
        source = content.encode("utf-8")
        try:
            root = parse(source, kind)
        except ParseError as e:
            logger.warning("Could not parse %s source: %s", kind.value, e)
            return RewriteResult.failed(content, f"Parse error: {e}")

        had_import = self.has_i18n_import(root)
        candidates = self.collect(root)

        keys = []
        changes = 0
        replacements = 0
        output = source
        floor = len(source) + 1
        for candidate in sorted(candidates, key=lambda c: c.start, reverse=True):
            if not candidate.rewrites_source:
                if self.catalog.record(candidate.key, candidate.text):
                    changes += 1
                keys.append(candidate.key)
                continue
            if candidate.end > floor:
                continue  # overlaps a span already replaced
            output = output[:candidate.start] + candidate.replacement.encode("utf-8") + output[candidate.end:]
            floor = candidate.start
            self.catalog.record(candidate.key, candidate.text)
            keys.append(candidate.key)
            replacements += 1
            changes += 1

        text = output.decode("utf-8")
        has_import = had_import or assume_imported
        if replacements and not has_import and self.config.auto_import_i18n:
            text = insert_import(text, self.config.import_statement)
            has_import = True

        if replacements:
            text = format_source(text, kind, self.config)

        return RewriteResult(
            success=True,
            changes=changes,
            content=text if changes else content,
            keys=list(reversed(keys)),
            has_import=has_import,
        )


def insert_import(text: str, statement: str) -> str:
    """Prepend ``statement``.

    A shebang line stays first, and a leading line break (the usual shape of
    a ``<script>`` block body) stays in front of the import.
    """
    if text.startswith("#!"):
        newline = text.find("\n")
        if newline == -1:
            return text + "\n" + statement
        return text[:newline + 1] + statement + text[newline + 1:]
    for lead in ("\r\n", "\n"):
        if text.startswith(lead):
            return lead + statement + text[len(lead):]
    return statement + text


def rewrite_script(
    content: str,
    config: I18nConfig,
    file_kind: FileKind,
    catalog: CatalogStore,
    assume_imported: bool = False,
) -> RewriteResult:
    """Rewrite literal text in a script. See :class:`ScriptRewriter`."""
    return ScriptRewriter(config, catalog).rewrite(content, file_kind, assume_imported=assume_imported)
