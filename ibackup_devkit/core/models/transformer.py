"""
Transformer model: a named, compiled path-rewrite rule.
"""

import re
from re import Pattern

from pydantic import BaseModel, Field, PrivateAttr, field_validator

# $name, ${name} or $$, following the expansion rules of the producer's
# regexp library: a bare name is the longest run of [A-Za-z0-9_].
_TEMPLATE_TOKEN = re.compile(r"\$(?:([A-Za-z0-9_]+)|\{([A-Za-z0-9_]+)\}|(\$))")


class Transformer(BaseModel):
    """
    Path-rewrite rule stored alongside migrated sets.

    Attributes:
        name: Preset name or the original specifier
        match: Regular expression anchored at the start of a path
        replace: Substitution template using $N / ${N} capture references
    """

    name: str = Field(..., min_length=1)
    match: str = Field(..., min_length=1)
    replace: str

    _pattern: Pattern | None = PrivateAttr(default=None)

    @field_validator("match")
    @classmethod
    def check_match_compiles(cls, v: str) -> str:
        """Reject match expressions that are not valid regular expressions."""
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid match pattern: {e}")
        return v

    @property
    def pattern(self) -> Pattern:
        if self._pattern is None:
            self._pattern = re.compile(self.match)
        return self._pattern

    def matches(self, path: str) -> bool:
        return self.pattern.match(path) is not None

    def apply(self, path: str) -> str:
        """
        Rewrite a path with this rule.

        Paths the rule does not match are returned unchanged.

        Args:
            path: Local path to rewrite

        Returns:
            Rewritten path
        """
        return self.pattern.sub(self._expand, path)

    def _expand(self, m: re.Match) -> str:
        def substitute(token: re.Match) -> str:
            if token.group(3):
                return "$"

            ref = token.group(1) or token.group(2)
            try:
                group = m.group(_group_ref(ref))
            except IndexError:
                return ""

            return group or ""

        return _TEMPLATE_TOKEN.sub(substitute, self.replace)


def _group_ref(ref: str) -> int | str:
    """Group number for all-digit references without a leading zero, else a name."""
    if ref.isdigit() and (ref == "0" or not ref.startswith("0")):
        return int(ref)
    return ref
