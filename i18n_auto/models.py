"""
Core data models for i18n-auto.

This module defines the records that flow between the rewriters, the
dispatcher and the reporting layer:

- FileKind: Which syntax a source file is written in
- CandidateKind: Where in the syntax an extracted fragment was found
- ExtractionCandidate: One fragment considered for extraction
- RewriteResult: Outcome of processing one file or one region
- BatchReport: Aggregate outcome of processing many files

Candidates are transient: they are created during a single parse pass,
consumed to build the rewritten text, then discarded.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Optional


class FileKind(str, Enum):
    """Supported source file kinds."""
    SCRIPT = "script"          # .js
    JSX = "jsx"                # .jsx
    TYPESCRIPT = "typescript"  # .ts
    TSX = "tsx"                # .tsx
    COMPONENT = "component"    # .vue


EXTENSION_KINDS = {
    ".js": FileKind.SCRIPT,
    ".mjs": FileKind.SCRIPT,
    ".cjs": FileKind.SCRIPT,
    ".jsx": FileKind.JSX,
    ".ts": FileKind.TYPESCRIPT,
    ".mts": FileKind.TYPESCRIPT,
    ".tsx": FileKind.TSX,
    ".vue": FileKind.COMPONENT,
}

# <script lang="..."> values inside components
SCRIPT_LANG_KINDS = {
    "": FileKind.SCRIPT,
    "js": FileKind.SCRIPT,
    "javascript": FileKind.SCRIPT,
    "jsx": FileKind.JSX,
    "ts": FileKind.TYPESCRIPT,
    "typescript": FileKind.TYPESCRIPT,
    "tsx": FileKind.TSX,
}


class CandidateKind(str, Enum):
    """Syntactic site an extraction candidate was found at."""
    LITERAL = "literal"                    # 'text' / "text"
    TEMPLATE_LITERAL = "template_literal"  # `text` without substitutions
    TEMPLATE_SEGMENT = "template_segment"  # static part of `a ${b} c`
    JSX_ATTRIBUTE = "jsx_attribute"        # <input placeholder="text" />
    JSX_TEXT = "jsx_text"                  # <p>text</p> in JSX
    ATTRIBUTE = "attribute"                # <el title="text"> in a template
    TEXT = "text"                          # <p>text</p> in a template


@dataclass
class ExtractionCandidate:
    """A span of source text considered for extraction.

    Attributes:
        start: Start offset in the text being rewritten
        end: End offset (exclusive)
        text: The literal value that goes into the catalog
        kind: Where the fragment was found
        key: Catalog key, set once accepted
        replacement: Text spliced in place of [start, end), set once accepted
    """
    start: int
    end: int
    text: str
    kind: CandidateKind
    key: str = ""
    replacement: Optional[str] = None

    @property
    def rewrites_source(self) -> bool:
        """Whether this candidate changes the source (segments only record)."""
        return self.replacement is not None


@dataclass
class RewriteResult:
    """Result of rewriting one file (or one region of a component).

    Attributes:
        success: False when the file could not be read, parsed or written
        changes: Number of replacements (plus newly recorded segments)
        content: Rewritten text, or the original if nothing changed
        errors: Human-readable error descriptions
        keys: Catalog keys touched while rewriting
        has_import: Whether the i18n import is present in the output
    """
    success: bool = True
    changes: int = 0
    content: str = ""
    errors: list[str] = field(default_factory=list)
    keys: list[str] = field(default_factory=list)
    has_import: bool = False

    @classmethod
    def failed(cls, content: str, *errors: str) -> "RewriteResult":
        return cls(success=False, changes=0, content=content, errors=list(errors))

    @property
    def changed(self) -> bool:
        return self.changes > 0


@dataclass
class FileOutcome:
    """Outcome of processing one file inside a batch."""
    path: Path
    result: RewriteResult


@dataclass
class BatchReport:
    """Aggregate outcome of a batch run."""
    outcomes: list[FileOutcome] = field(default_factory=list)

    def add(self, path: Path, result: RewriteResult) -> None:
        self.outcomes.append(FileOutcome(path=path, result=result))

    @property
    def total_changes(self) -> int:
        return sum(o.result.changes for o in self.outcomes if o.result.success)

    @property
    def processed(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.result.success]

    @property
    def failed(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if not o.result.success]

    @property
    def changed(self) -> list[FileOutcome]:
        return [o for o in self.outcomes if o.result.success and o.result.changed]

    def to_dict(self) -> dict:
        """Summary for logging/reporting."""
        return {
            "files": len(self.outcomes),
            "processed": len(self.processed),
            "changed": len(self.changed),
            "failed": len(self.failed),
            "total_changes": self.total_changes,
        }
