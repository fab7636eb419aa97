"""Tests for the WCAG catalog and rule equivalence table."""

from a11y_aggregator.models import ToolSource, WCAGLevel, WCAGPrinciple


class TestWcagCatalog:
    """Tests for WCAG criteria lookups."""

    def test_get_criterion(self):
        """Test looking up a criterion by id."""
        from a11y_aggregator.catalog import get_criterion

        criterion = get_criterion("1.4.3")

        assert criterion.title == "Contrast (Minimum)"
        assert criterion.level == WCAGLevel.AA
        assert criterion.principle == WCAGPrinciple.PERCEIVABLE

    def test_unknown_criterion(self):
        """Test unknown ids return None."""
        from a11y_aggregator.catalog import get_criterion, reference_for

        assert get_criterion("9.9.9") is None
        assert reference_for("9.9.9") is None
        assert reference_for(None) is None

    def test_filters(self):
        """Test filtering by level and principle."""
        from a11y_aggregator.catalog import get_criteria_by_level, get_criteria_by_principle

        robust = get_criteria_by_principle(WCAGPrinciple.ROBUST)
        aaa = get_criteria_by_level(WCAGLevel.AAA)

        assert {c.id for c in robust} == {"4.1.1", "4.1.2", "4.1.3"}
        assert all(c.level == WCAGLevel.AAA for c in aaa)
        assert "1.4.6" in {c.id for c in aaa}

    def test_lighthouse_audit_reference(self):
        """Test Lighthouse audits map to WCAG references."""
        from a11y_aggregator.catalog import reference_for_lighthouse_audit

        reference = reference_for_lighthouse_audit("image-alt")

        assert reference.criterion == "1.1.1"
        assert reference.level == WCAGLevel.A
        assert reference_for_lighthouse_audit("uses-http2") is None

    def test_criterion_sort_key(self):
        """Test criteria sort numerically."""
        from a11y_aggregator.catalog import criterion_sort_key

        ids = ["1.4.10", "1.4.3", "4.1.2", "1.1.1", "custom"]

        assert sorted(ids, key=criterion_sort_key) == ["1.1.1", "1.4.3", "1.4.10", "4.1.2", "custom"]


class TestRuleEquivalence:
    """Tests for cross-engine rule normalization."""

    def test_axe_rule(self):
        """Test axe rule ids map to their defect class."""
        from a11y_aggregator.catalog import canonical_defect

        assert canonical_defect(ToolSource.AXE_CORE, "image-alt") == "image-alt"
        assert canonical_defect(ToolSource.AXE_CORE, "label") == "form-label"

    def test_pa11y_code_reduced_to_technique(self):
        """Test pa11y codes are reduced to the technique suffix."""
        from a11y_aggregator.catalog import canonical_defect, normalize_rule_id

        code = "WCAG2AA.Principle1.Guideline1_1.1_1_1.H37"

        assert normalize_rule_id(ToolSource.PA11Y, code) == "H37"
        assert canonical_defect(ToolSource.PA11Y, code) == "image-alt"

    def test_pa11y_longest_prefix(self):
        """Test technique lookups fall back from the full suffix to shorter prefixes."""
        from a11y_aggregator.catalog import canonical_defect

        assert canonical_defect(ToolSource.PA11Y, "WCAG2AA.Principle1.Guideline1_4.1_4_3.G18.Fail") == "color-contrast"
        assert canonical_defect(ToolSource.PA11Y, "WCAG2AA.Principle1.Guideline1_4.1_4_3.G18.Abs") == "color-contrast"
        assert canonical_defect(
            ToolSource.PA11Y, "WCAG2AA.Principle4.Guideline4_1.4_1_2.H91.InputText.Name"
        ) == "form-label"

    def test_eslint_prefix_dropped(self):
        """Test eslint plugin prefixes are removed."""
        from a11y_aggregator.catalog import canonical_defect

        assert canonical_defect(ToolSource.ESLINT_VUEJS_A11Y, "vuejs-accessibility/alt-text") == "image-alt"

    def test_unknown_rule_falls_back_to_id(self):
        """Test rules missing from the table keep their normalized id."""
        from a11y_aggregator.catalog import canonical_defect

        assert canonical_defect(ToolSource.AXE_CORE, "Region") == "region"
        assert canonical_defect(ToolSource.LIGHTHOUSE, "region") == "region"

    def test_defect_criterion(self):
        """Test defect classes carry a default criterion."""
        from a11y_aggregator.catalog import defect_criterion

        assert defect_criterion("image-alt") == "1.1.1"
        assert defect_criterion("region") is None
