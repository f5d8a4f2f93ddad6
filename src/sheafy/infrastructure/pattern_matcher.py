"""Gitignore-style pattern matching

Rules are evaluated in declaration order and the last rule that matches a
path decides whether it is excluded. Individual patterns are compiled with
`pathspec`'s `GitIgnoreSpec`.
"""

import fnmatch
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

import pathspec

from sheafy.domain.errors import ConfigError

logger = logging.getLogger(__name__)

CUSTOM_ORIGIN = "ignore_patterns"


@dataclass(frozen=True)
class IgnoreRule:
    """A single compiled ignore pattern"""

    pattern: str  # Pattern text without the leading "!"
    negated: bool  # True for "!pattern" (re-include)
    origin: str  # ".gitignore" file path or "ignore_patterns"
    line: int  # 1-based line in its source
    base_dir: str = ""  # Directory the pattern is relative to
    spec: pathspec.PathSpec = field(default=None, compare=False, repr=False)

    @property
    def dir_only(self) -> bool:
        """Pattern ends with "/" and only matches directories"""
        return self.pattern.endswith("/")

    @property
    def anchored(self) -> bool:
        """Pattern contains "/" and matches relative to its base directory"""
        return "/" in self.pattern.rstrip("/")

    @property
    def source(self) -> str:
        return f"{self.origin}:{self.line}"

    def _relative(self, path: str) -> Optional[str]:
        if not self.base_dir:
            return path
        prefix = self.base_dir + "/"
        if path.startswith(prefix):
            return path[len(prefix):]
        return None

    def matches(self, path: str, is_dir: bool) -> bool:
        """Check if the rule matches a path (ignoring polarity)

        Args:
            path: Path relative to the collection root
            is_dir: Whether the path is a directory

        Returns:
            True if matches
        """
        relative = self._relative(path)
        if relative is None:
            return False
        # Directory-only patterns need the trailing slash to match the directory itself
        candidate = relative + "/" if is_dir else relative
        return self.spec.match_file(candidate)

    def may_match_below(self, dir_path: str) -> bool:
        """Check if the rule could match some path inside a directory

        Conservative: returns True whenever a match cannot be ruled out
        by comparing the pattern's leading segments with the directory.
        """
        if self.base_dir:
            if self.base_dir.startswith(dir_path + "/"):
                return True
            if dir_path != self.base_dir and not dir_path.startswith(self.base_dir + "/"):
                return False
            dir_path = dir_path[len(self.base_dir) + 1:] if dir_path != self.base_dir else ""

        if not self.anchored:
            return True
        if not dir_path:
            return True

        segments = self.pattern.strip("/").split("/")
        for i, dir_segment in enumerate(dir_path.split("/")):
            if i >= len(segments) or segments[i] == "**":
                return True
            if not fnmatch.fnmatchcase(dir_segment, segments[i]):
                return False
        return True


def _check_brackets(body: str) -> Optional[str]:
    """Return an error message if a character class is never closed"""
    i = 0
    while i < len(body):
        char = body[i]
        if char == "\\":
            i += 2
            continue
        if char == "[":
            j = i + 1
            if j < len(body) and body[j] in "!^":
                j += 1
            # A "]" right after the opening bracket is a literal member
            if j < len(body) and body[j] == "]":
                j += 1
            while j < len(body) and body[j] != "]":
                j += 1
            if j >= len(body) or body[j] != "]":
                return f"unbalanced '[' at column {i + 1}"
            i = j
        i += 1
    return None


def parse_rules(
    lines: Iterable[str], origin: str = CUSTOM_ORIGIN, base_dir: str = ""
) -> List[IgnoreRule]:
    """Compile pattern lines into ordered rules

    Blank lines and "#" comments are skipped.

    Args:
        lines: Pattern lines in gitignore syntax
        origin: Where the lines came from (for error messages)
        base_dir: Directory the patterns are relative to ("" for the root)

    Returns:
        Rules in declaration order

    Raises:
        ConfigError: If a pattern is malformed
    """
    rules = []
    for line_number, raw in enumerate(lines, 1):
        line = raw.rstrip("\r\n")
        # Trailing spaces are insignificant unless escaped
        if not line.endswith("\\ "):
            line = line.rstrip()
        if not line or line.startswith("#"):
            continue

        negated = line.startswith("!")
        body = line[1:] if negated else line
        if not body:
            raise ConfigError(f"Empty negated pattern in {origin}:{line_number}")

        problem = _check_brackets(body)
        if problem:
            raise ConfigError(f"Invalid pattern {line!r} in {origin}:{line_number}: {problem}")

        try:
            spec = pathspec.GitIgnoreSpec.from_lines([body])
        except ValueError as e:
            raise ConfigError(f"Invalid pattern {line!r} in {origin}:{line_number}: {e}") from e

        rules.append(
            IgnoreRule(
                pattern=body,
                negated=negated,
                origin=origin,
                line=line_number,
                base_dir=base_dir,
                spec=spec,
            )
        )
    return rules


class PatternMatcher:
    """Ordered ignore rules with last-match-wins evaluation

    Instances are immutable; adding rules returns a new matcher.
    `.gitignore` rules always precede the configured patterns.
    """

    def __init__(
        self,
        gitignore_rules: Sequence[IgnoreRule] = (),
        custom_rules: Sequence[IgnoreRule] = (),
    ):
        self._gitignore_rules: Tuple[IgnoreRule, ...] = tuple(gitignore_rules)
        self._custom_rules: Tuple[IgnoreRule, ...] = tuple(custom_rules)

    @classmethod
    def compile(
        cls, patterns: Iterable[str], base_dir: str = "", origin: str = CUSTOM_ORIGIN
    ) -> "PatternMatcher":
        """Compile configured ignore patterns into a matcher

        Args:
            patterns: Pattern lines in gitignore syntax
            base_dir: Directory the patterns are relative to
            origin: Source name used in error messages

        Returns:
            PatternMatcher instance

        Raises:
            ConfigError: If a pattern is malformed
        """
        return cls(custom_rules=parse_rules(patterns, origin=origin, base_dir=base_dir))

    @property
    def rules(self) -> Tuple[IgnoreRule, ...]:
        """All rules in evaluation order"""
        return self._gitignore_rules + self._custom_rules

    def with_gitignore(self, rules: Sequence[IgnoreRule]) -> "PatternMatcher":
        """Return a matcher with .gitignore rules appended after existing ones"""
        if not rules:
            return self
        return PatternMatcher(self._gitignore_rules + tuple(rules), self._custom_rules)

    def deciding_rule(self, path: str, is_dir: bool = False) -> Optional[Tuple[int, IgnoreRule]]:
        """Find the last rule matching a path

        Returns:
            Tuple of (rule index, rule), or None if no rule matches
        """
        rules = self.rules
        for index in range(len(rules) - 1, -1, -1):
            if rules[index].matches(path, is_dir):
                return index, rules[index]
        return None

    def is_excluded(self, path: str, is_dir: bool = False) -> bool:
        """Check if a path is excluded

        A directory is only reported as excluded when no later negated rule
        could re-include something inside it, so callers may skip
        descending into excluded directories.

        Args:
            path: Path relative to the collection root, forward slashes
            is_dir: Whether the path is a directory

        Returns:
            True if the path is excluded
        """
        decision = self.deciding_rule(path, is_dir)
        if decision is None:
            return False
        index, rule = decision
        if rule.negated:
            return False
        if is_dir:
            for later in self.rules[index + 1:]:
                if later.negated and later.may_match_below(path):
                    logger.debug(f"Descending into {path}: {later.source} may re-include children")
                    return False
        logger.debug(f"Excluded {path} by {rule.source} ({rule.pattern})")
        return True
