"""Specification document loader (OpenAPI 2/3, JSON or YAML) with safety limits."""

from __future__ import annotations

import logging
import re
from datetime import date
from pathlib import Path
from typing import Any

from ruamel.yaml import YAML, YAMLError
from ruamel.yaml.comments import CommentedMap, CommentedSeq
from ruamel.yaml.composer import MaxDepthExceededError

from reqlint.models.errors import SpecParseError, SpecSafetyError
from reqlint.parser.syntax import parse_json

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Safety limits
# ---------------------------------------------------------------------------

_MAX_DOCUMENT_SIZE = 5_000_000  # 5M characters
_MAX_NODE_COUNT = 200_000
_MAX_DEPTH = 64

# Regex to detect YAML anchor definitions (&name).  An anchor only ever opens
# a node, so "&" inside a plain scalar ("Tom &Jerry docs") is ordinary text.
_ANCHOR_RE = re.compile(
    r"(?:^[ \t]*|[:?-][ \t]+|[\[{,][ \t]*)&[^\s\[\]{},]+(?=[\s\[\]{},]|$)",
    re.MULTILINE,
)


class SpecLoader:
    """Loads API specification text into a plain ``dict``.

    JSON documents (text starting with ``{``) go through the same JSON parser
    the payload validator uses, so their errors carry line/column.  Anything
    else is parsed as YAML with ruamel.yaml.
    """

    def __init__(
        self,
        max_size: int = _MAX_DOCUMENT_SIZE,
        max_nodes: int = _MAX_NODE_COUNT,
        max_depth: int = _MAX_DEPTH,
    ) -> None:
        self._max_size = max_size
        self._max_nodes = max_nodes
        self._max_depth = max_depth

    # -- safety checks -------------------------------------------------------

    def _check_size(self, content: str) -> None:
        if len(content) > self._max_size:
            raise SpecSafetyError(
                f"Specification document exceeds maximum size "
                f"({len(content):,} chars > {self._max_size:,} limit)"
            )

    @staticmethod
    def _check_anchors(content: str) -> None:
        if _ANCHOR_RE.search(content):
            raise SpecSafetyError("YAML anchors/aliases are not supported in specification documents")

    def _check_shape(self, data: Any) -> None:
        """Post-parse defense-in-depth: bound total node count and nesting depth."""
        count = 0
        stack: list[tuple[Any, int]] = [(data, 1)]
        while stack:
            node, depth = stack.pop()
            count += 1
            if count > self._max_nodes:
                raise SpecSafetyError(
                    f"Specification document exceeds maximum node count ({self._max_nodes:,})"
                )
            if depth > self._max_depth:
                raise SpecSafetyError(
                    f"Specification document exceeds maximum nesting depth ({self._max_depth})"
                )
            if isinstance(node, dict):
                stack.extend((child, depth + 1) for child in node.values())
            elif isinstance(node, list):
                stack.extend((child, depth + 1) for child in node)

    # -- public loading API --------------------------------------------------

    def load(self, path: Path) -> dict[str, Any]:
        """Load a specification file."""
        with path.open("r", encoding="utf-8") as handle:
            content = handle.read()
        return self.load_string(content)

    def load_string(self, content: str) -> dict[str, Any]:
        """Load a specification from JSON or YAML text.

        Raises ``SpecSafetyError`` for oversized or hostile input and
        ``SpecParseError`` for unparsable text or a document without a
        ``paths`` mapping.
        """
        self._check_size(content)
        if content.lstrip().startswith("{"):
            data = self._load_json(content)
        else:
            self._check_anchors(content)
            data = self._load_yaml(content)

        if not isinstance(data, dict):
            raise SpecParseError("Specification document must be a mapping at the top level")
        self._check_shape(data)
        if not isinstance(data.get("paths"), dict):
            raise SpecParseError("Specification document has no 'paths' mapping")
        logger.debug("Loaded specification with %d paths", len(data["paths"]))
        return data

    def _load_json(self, content: str) -> Any:
        diagnosis, value = parse_json(content)
        if not diagnosis.valid:
            raise SpecParseError(
                f"Invalid JSON specification: {diagnosis.error_message}",
                line=diagnosis.line,
                column=diagnosis.column,
            )
        return value

    def _new_yaml(self) -> YAML:
        """A fresh round-trip parser per document; ``YAML`` instances are not thread-safe."""
        yaml = YAML()
        # Same limit as the post-parse shape check.
        yaml.max_depth = self._max_depth
        return yaml

    def _load_yaml(self, content: str) -> Any:
        yaml = self._new_yaml()
        try:
            data = yaml.load(content)
            plain = self._to_plain_value(data)
        except MaxDepthExceededError as exc:
            raise SpecSafetyError(
                f"Specification document exceeds maximum nesting depth ({self._max_depth})"
            ) from exc
        except YAMLError as exc:
            line = column = None
            mark = getattr(exc, "problem_mark", None)
            if mark is not None:
                line, column = mark.line + 1, mark.column + 1
            raise SpecParseError(f"Invalid YAML specification: {exc}", line=line, column=column) from exc
        except RecursionError as exc:
            raise SpecSafetyError("Specification document is nested too deeply") from exc
        return {} if plain is None else plain

    def _to_plain_value(self, data: Any) -> Any:
        """Convert ruamel.yaml nodes to plain JSON values.

        Timestamps (``2024-01-01``) become ISO strings and any other non-JSON
        scalar its ``str()``, so loaded documents always serialise with ``json``.
        """
        if isinstance(data, CommentedMap | dict):
            return {str(k): self._to_plain_value(v) for k, v in data.items()}
        if isinstance(data, CommentedSeq | list):
            return [self._to_plain_value(item) for item in data]
        if isinstance(data, bool) or data is None:
            return data
        if isinstance(data, int):
            return int(data)
        if isinstance(data, float):
            return float(data)
        if isinstance(data, str):
            return str(data)
        if isinstance(data, date):
            return data.isoformat()
        return str(data)
