"""
Unit Tests for the needle matcher
"""
from entitygen.needles.matcher import Needle, count, locate


ROUTER = """import x from 'y';
  // jhipster-needle-add-entity-to-router-import - imports here
export default [
    // jhipster-needle-add-entity-to-router - routes here
];
"""


class TestLocate:
    """Tests for locate()"""

    def test_finds_needle_line_and_indent(self):
        """Test the match reports the line index and its indentation"""
        match = locate(ROUTER, Needle.ENTITY_TO_ROUTER)

        assert match is not None
        assert match.line_index == 3
        assert match.indent == "    "
        assert ROUTER[match.offset:].startswith("jhipster-needle-add-entity-to-router ")

    def test_does_not_match_longer_needle(self):
        """Test a needle is not found inside a longer needle sharing its prefix"""
        text = "// jhipster-needle-add-entity-to-router-import\n"

        assert locate(text, Needle.ENTITY_TO_ROUTER) is None
        assert locate(text, Needle.ENTITY_TO_ROUTER_IMPORT) is not None

    def test_missing_needle_returns_none(self):
        """Test a file without the needle yields no match"""
        assert locate("const a = 1;\n", Needle.ENTITY_TO_MENU) is None

    def test_case_sensitive(self):
        """Test matching is case-sensitive"""
        assert locate("// JHIPSTER-NEEDLE-ADD-ENTITY-TO-MENU\n", Needle.ENTITY_TO_MENU) is None

    def test_first_occurrence_wins(self):
        """Test the first of several occurrences is used"""
        text = "a\n  // my-needle\nb\n      // my-needle\n"

        match = locate(text, "my-needle")

        assert match.line_index == 1
        assert match.indent == "  "

    def test_accepts_plain_string_needle(self):
        """Test arbitrary string needles are supported"""
        assert locate("<!-- custom-needle -->", "custom-needle").line_index == 0


class TestCount:
    """Tests for count()"""

    def test_counts_whole_tokens_only(self):
        """Test prefix needles are not counted"""
        assert count(ROUTER, Needle.ENTITY_TO_ROUTER) == 1
        assert count(ROUTER + ROUTER, Needle.ENTITY_TO_ROUTER_IMPORT) == 2
