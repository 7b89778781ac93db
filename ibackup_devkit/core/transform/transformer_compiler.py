"""
Compiles transformer specifiers into Transformer rules.

A specifier is either a preset name or a "prefix=<match>:<replace>" rule.
"""

from pydantic import ValidationError

from ..exceptions import WrongTransformerError
from ..models import Transformer

RULE_PREFIX = "prefix="
RULE_SEPARATOR = ":"

# /lustre/scratchNNN/<anything>/{projects,teams,users}[_v2]/<owner>/
LUSTRE_OWNER_PATTERN = (
    r"^/lustre/(scratch[^/]+)(/[^/]*)+?/(projects|teams|users)(_v2)?/([^/]+)/"
)

TRANSFORMER_PRESETS: dict[str, tuple[str, str]] = {
    "humgen": (LUSTRE_OWNER_PATTERN, "/humgen/$3/$5/$1$4/"),
    "gengen": (LUSTRE_OWNER_PATTERN, "/humgen/gengen/$3/$5/$1$4/"),
}


def compile_transformer(specifier: str) -> Transformer:
    """
    Compile a transformer specifier.

    Args:
        specifier: Preset name, or "prefix=<match>:<replace>" ("prefix=" optional)

    Returns:
        Transformer named after the preset or the full specifier

    Raises:
        WrongTransformerError: If the rule does not split into exactly one
            match and one replacement, or the match is not a valid regex
    """
    if specifier in TRANSFORMER_PRESETS:
        match, replace = TRANSFORMER_PRESETS[specifier]
        return Transformer(name=specifier, match=match, replace=replace)

    rule = specifier.removeprefix(RULE_PREFIX)
    parts = rule.split(RULE_SEPARATOR)
    if len(parts) != 2:
        raise WrongTransformerError(specifier)

    try:
        return Transformer(name=specifier, match="^" + parts[0], replace=parts[1])
    except ValidationError as e:
        raise WrongTransformerError(specifier, e.errors()[0]["msg"]) from e
