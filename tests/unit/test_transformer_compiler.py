"""
Unit tests for transformer compilation and path rewriting.

Includes property-based testing with hypothesis for prefix rules.
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from ibackup_devkit.core.exceptions import WrongTransformerError
from ibackup_devkit.core.transform import TRANSFORMER_PRESETS, compile_transformer

# Characters that are literal in a regular expression and never ":"
rule_text = st.text(alphabet="abcdefghijklmnopqrstuvwxyz0123456789/_-", max_size=30)


class TestPresets:
    """Tests for the humgen and gengen presets"""

    def test_humgen(self):
        """Test compiling the humgen preset"""
        transformer = compile_transformer("humgen")

        assert transformer.name == "humgen"
        assert transformer.match.startswith("^/lustre/")
        assert transformer.replace == "/humgen/$3/$5/$1$4/"

    def test_gengen(self):
        """Test compiling the gengen preset"""
        transformer = compile_transformer("gengen")

        assert transformer.name == "gengen"
        assert transformer.replace == "/humgen/gengen/$3/$5/$1$4/"

    def test_presets_share_match_and_differ_by_gengen(self):
        """Test that gengen only adds a path component to humgen"""
        humgen = compile_transformer("humgen")
        gengen = compile_transformer("gengen")

        assert humgen.match == gengen.match
        assert gengen.replace == humgen.replace.replace("/humgen/", "/humgen/gengen/", 1)

    def test_presets_table(self):
        """Test the exposed presets"""
        assert set(TRANSFORMER_PRESETS) == {"humgen", "gengen"}

    @pytest.mark.parametrize("path,expected", [
        (
            "/lustre/scratch123/humgen/projects_v2/cohort/dir/file.txt",
            "/humgen/projects/cohort/scratch123_v2/dir/file.txt",
        ),
        (
            "/lustre/scratch118/humgen/hgi/teams/hgi/a.txt",
            "/humgen/teams/hgi/scratch118/a.txt",
        ),
        (
            "/lustre/scratch125/realdata/mdt0/users/ab12/notes",
            "/humgen/users/ab12/scratch125/notes",
        ),
    ])
    def test_humgen_rewrites_paths(self, path, expected):
        """Test humgen rewrites of lustre paths"""
        assert compile_transformer("humgen").apply(path) == expected

    def test_gengen_rewrites_paths(self):
        """Test gengen rewrites of lustre paths"""
        transformer = compile_transformer("gengen")

        path = "/lustre/scratch123/gengen/projects_v2/cohort/dir/file.txt"
        assert transformer.apply(path) == "/humgen/gengen/projects/cohort/scratch123_v2/dir/file.txt"

    def test_unmatched_path_is_unchanged(self):
        """Test that unmatched paths are returned as-is"""
        transformer = compile_transformer("humgen")

        assert not transformer.matches("/nfs/users/ab12/file")
        assert transformer.apply("/nfs/users/ab12/file") == "/nfs/users/ab12/file"


class TestPrefixRules:
    """Tests for prefix=<match>:<replace> rules"""

    def test_prefix_rule(self):
        """Test compiling a prefix= rule"""
        transformer = compile_transformer("prefix=/lustre:/humgen")

        assert transformer.name == "prefix=/lustre:/humgen"
        assert transformer.match == "^/lustre"
        assert transformer.replace == "/humgen"
        assert transformer.apply("/lustre/scratch/file") == "/humgen/scratch/file"

    def test_prefix_literal_is_optional(self):
        """Test compiling a rule without the prefix= literal"""
        transformer = compile_transformer("/lustre:/humgen")

        assert transformer.name == "/lustre:/humgen"
        assert transformer.match == "^/lustre"
        assert transformer.replace == "/humgen"

    @pytest.mark.parametrize("specifier", [
        "",
        "prefix=",
        "prefix=/lustre",
        "unknown",
        "prefix=/a:/b:/c",
        "/a::/b",
    ])
    def test_wrong_separator_count(self, specifier):
        """Test that malformed specifiers raise WrongTransformerError"""
        with pytest.raises(WrongTransformerError) as exc_info:
            compile_transformer(specifier)

        assert exc_info.value.specifier == specifier
        assert "wrong transformer" in str(exc_info.value)

    def test_invalid_match_pattern(self):
        """Test that an invalid match regex raises WrongTransformerError"""
        with pytest.raises(WrongTransformerError) as exc_info:
            compile_transformer("prefix=/lustre/(scratch:/humgen")

        assert "invalid match pattern" in str(exc_info.value)

    def test_replacement_groups(self):
        """Test capture group references in the replacement"""
        transformer = compile_transformer(r"prefix=/lustre/(scratch\d+)/:/humgen/$1/")

        assert transformer.apply("/lustre/scratch42/a/b") == "/humgen/scratch42/a/b"

    def test_replacement_escapes(self):
        """Test braced references, literal dollars and unknown groups"""
        transformer = compile_transformer(r"prefix=/(a)(b):/${1}x$$$9$2")

        # ${1} is group 1, $$ a literal dollar, $9 an unknown group
        assert transformer.apply("/ab/c") == "/ax$b/c"

    def test_leading_zero_reference_is_a_name(self):
        """Test that references with a leading zero are group names"""
        transformer = compile_transformer(r"prefix=/(a):/x$01-${01}y$0")

        assert transformer.apply("/a/c") == "/x-y/a/c"

    def test_reference_stops_at_non_ascii(self):
        """Test that a reference ends at the first non-ASCII character"""
        transformer = compile_transformer("prefix=/(a):/$1\u00e9")

        assert transformer.apply("/a/c") == "/a\u00e9/c"

    def test_reference_includes_ascii_word_characters(self):
        """Test that a reference takes every following ASCII word character"""
        transformer = compile_transformer("prefix=/(a):/$1x")

        assert transformer.apply("/a/c") == "//c"

    @given(match=rule_text, replace=rule_text)
    def test_well_formed_rules(self, match, replace):
        """Test compiling arbitrary well-formed rules"""
        transformer = compile_transformer(f"prefix={match}:{replace}")

        assert transformer.match == "^" + match
        assert transformer.replace == replace

    @given(parts=st.lists(rule_text, min_size=3, max_size=5))
    def test_more_than_one_separator_fails(self, parts):
        """Test that extra separators are rejected"""
        with pytest.raises(WrongTransformerError):
            compile_transformer("prefix=" + ":".join(parts))

    @given(rule=rule_text.filter(lambda r: r not in TRANSFORMER_PRESETS))
    def test_no_separator_fails(self, rule):
        """Test that a rule without a separator is rejected"""
        with pytest.raises(WrongTransformerError):
            compile_transformer(rule)
