"""
EstimateCalculator end-to-end — survey + rate tables → EstimateResult.

Reference job (conftest `survey` + `rate_tables`): 1,000 sqft asbestos,
containment level 2, clearance and permits required, 25% org markup.

    labor       48,750.00   supervisor 250 h × 85 + technicians 500 h × 55
    equipment    1,050.00   4 items × 2 days
    materials    1,340.00   6 items
    disposal    20,000.00   50 cuyd × 400 (asbestos_non_friable)
    travel         250.00   flat, 25 mi
    testing        450.00   3 samples × 150
    permits        600.00   EPA 350 + state 250
    subtotal    72,440.00
    markup      18,110.00   25%
    total       90,550.00

Tests:
1-4.   Reference totals, category order, sort order
5-8.   Option toggles, custom markup, markup fallbacks
9-11.  Discount and tax hooks
12-15. Determinism, monotonicity, rounding, every hazard × level
16-19. Rate table loading: once, reload, inactive rows, unknown org
20-22. Missing configuration warnings
23-26. Invalid surveys
27-28. Convenience helpers
29.    Concurrent first use loads rate tables once
30-35. Any configured category gives a positive total
36-40. Multi-hazard surveys (hazard_assessments)
"""

import threading
import time

import pytest

from abatement.calculators import rules
from abatement.calculators.registry import list_categories
from abatement.estimate_calculator import (
    EstimateCalculator,
    InvalidSurveyError,
    calculate_estimate_from_survey,
    create_estimate_calculator,
)
from abatement.models import HazardType, LineItemType
from abatement.rate_tables import StaticRateTableProvider
from abatement.schemas import CalculatorOptions, DisposalFee, EquipmentRate, HazardAssessment, RateTables, SiteSurvey


def _calculator(tables, organization_id="org-123", **kwargs):
    return EstimateCalculator(organization_id, StaticRateTableProvider(tables), **kwargs)


def _survey(**overrides):
    fields = {
        "organization_id": "org-123",
        "hazard_type": "asbestos",
        "containment_level": 2,
        "area_sqft": 1000,
        "clearance_required": True,
        "regulatory_notifications_needed": True,
    }
    fields.update(overrides)
    return SiteSurvey(**fields)


def _category_total(result, item_type):
    return round(sum(i.total for i in result.line_items if i.item_type == item_type), 2)


# ============================================================
# 1-4. Reference job
# ============================================================

def test_reference_job_totals(rate_tables, survey):
    result = _calculator(rate_tables).calculate_from_survey(survey)

    assert _category_total(result, LineItemType.LABOR) == 48750.0
    assert _category_total(result, LineItemType.EQUIPMENT) == 1050.0
    assert _category_total(result, LineItemType.MATERIAL) == 1340.0
    assert _category_total(result, LineItemType.DISPOSAL) == 20000.0
    assert _category_total(result, LineItemType.TRAVEL) == 250.0
    assert _category_total(result, LineItemType.TESTING) == 450.0
    assert _category_total(result, LineItemType.PERMIT) == 600.0

    assert result.effective_area_sqft == 1000.0
    assert result.subtotal == 72440.0
    assert result.markup_percent == 25.0
    assert result.markup_amount == 18110.0
    assert result.total == 90550.0
    assert result.warnings == []


def test_reference_job_line_item_count(rate_tables, survey):
    result = _calculator(rate_tables).calculate_from_survey(survey)
    assert len(result.line_items) == 17
    assert all(i.is_included for i in result.line_items)


def test_line_items_in_category_order(rate_tables, survey):
    result = _calculator(rate_tables).calculate_from_survey(survey)
    order = list_categories()
    positions = [order.index(i.item_type) for i in result.line_items]
    assert positions == sorted(positions), "Categories should never interleave"
    assert result.line_items[0].item_type == LineItemType.LABOR
    assert result.line_items[-1].item_type == LineItemType.PERMIT


def test_sort_order_is_sequential(rate_tables, survey):
    result = _calculator(rate_tables).calculate_from_survey(survey)
    assert [i.sort_order for i in result.line_items] == list(range(len(result.line_items)))


# ============================================================
# 5-8. Options and markup
# ============================================================

def test_toggles_only_remove_their_own_category(rate_tables, survey):
    calculator = _calculator(rate_tables)
    full = calculator.calculate_from_survey(survey)
    trimmed = calculator.calculate_from_survey(
        survey,
        CalculatorOptions(include_travel=False, include_testing=False, include_permits=False),
    )

    removed = {LineItemType.TRAVEL, LineItemType.TESTING, LineItemType.PERMIT}
    assert not any(i.item_type in removed for i in trimmed.line_items)
    for item_type in (LineItemType.LABOR, LineItemType.EQUIPMENT, LineItemType.MATERIAL, LineItemType.DISPOSAL):
        assert _category_total(trimmed, item_type) == _category_total(full, item_type)
    assert trimmed.subtotal == 71140.0
    assert trimmed.warnings == [], "Disabled travel is not missing configuration"


def test_custom_markup_overrides_org_markup(rate_tables, survey):
    result = _calculator(rate_tables).calculate_from_survey(survey, CalculatorOptions(custom_markup=10))
    assert result.markup_percent == 10
    assert result.markup_amount == 7244.0
    assert result.total == 79684.0


def test_org_markup_beats_calculator_default(make_rate_tables, survey):
    result = _calculator(make_rate_tables(markup=30.0), default_markup_percent=5.0).calculate_from_survey(survey)
    assert result.markup_percent == 30.0


def test_default_markup_without_pricing_settings(rate_tables, survey):
    tables = rate_tables.model_copy(update={"pricing_settings": None})
    result = _calculator(tables).calculate_from_survey(survey)
    assert result.markup_percent == 20.0
    assert result.markup_amount == 14488.0

    result = _calculator(tables, default_markup_percent=15.0).calculate_from_survey(survey)
    assert result.markup_percent == 15.0


# ============================================================
# 9-11. Discount and tax
# ============================================================

def test_discount_and_tax(rate_tables, survey):
    options = CalculatorOptions(discount_percent=10, tax_percent=8)
    result = _calculator(rate_tables).calculate_from_survey(survey, options)
    assert result.discount_amount == 9055.0
    assert result.tax_amount == 6519.6
    assert result.total == 88014.6


def test_discount_capped_at_org_maximum(rate_tables, survey):
    result = _calculator(rate_tables).calculate_from_survey(survey, CalculatorOptions(discount_percent=30))
    assert result.discount_percent == 15.0
    assert result.discount_amount == 13582.5
    assert result.total == 76967.5
    assert any("capped" in w for w in result.warnings)


def test_custom_markup_below_minimum_warns(rate_tables, survey):
    result = _calculator(rate_tables).calculate_from_survey(survey, CalculatorOptions(custom_markup=5))
    assert result.markup_percent == 5
    assert result.markup_amount == 3622.0
    assert any("below the organization minimum" in w for w in result.warnings)


# ============================================================
# 12-15. Properties
# ============================================================

def test_same_input_same_output(rate_tables, survey):
    calculator = _calculator(rate_tables)
    first = calculator.calculate_from_survey(survey)
    second = calculator.calculate_from_survey(survey)
    assert first.model_dump() == second.model_dump()


def test_total_grows_with_area_and_containment(rate_tables):
    calculator = _calculator(rate_tables)

    by_area = [calculator.calculate_from_survey(_survey(area_sqft=a)).total for a in (250, 500, 1000, 2000, 4000)]
    assert by_area == sorted(by_area)

    by_level = [calculator.calculate_from_survey(_survey(containment_level=lvl)).total for lvl in (1, 2, 3, 4)]
    assert by_level == sorted(by_level)


def test_money_rounded_to_cents(rate_tables):
    options = CalculatorOptions(discount_percent=7.5, tax_percent=8.25)
    result = _calculator(rate_tables).calculate_from_survey(_survey(area_sqft=333.3, hazard_type="mold"), options)
    for item in result.line_items:
        assert item.total == round(item.quantity * item.unit_cost, 2)
    for value in (result.subtotal, result.markup_amount, result.discount_amount, result.tax_amount, result.total):
        assert value == round(value, 2)
    assert result.subtotal == round(sum(i.total for i in result.line_items), 2)
    assert result.discount_amount > 0
    assert result.tax_amount > 0
    assert result.discount_amount == round((result.subtotal + result.markup_amount) * 7.5 / 100, 2)
    assert result.tax_amount == round(
        (result.subtotal + result.markup_amount - result.discount_amount) * 8.25 / 100, 2
    )
    assert result.total == round(
        result.subtotal + result.markup_amount - result.discount_amount + result.tax_amount, 2
    )


@pytest.mark.parametrize("hazard", [h.value for h in HazardType])
@pytest.mark.parametrize("level", [1, 2, 3, 4])
def test_every_hazard_and_level_priced(rate_tables, hazard, level):
    result = _calculator(rate_tables).calculate_from_survey(_survey(hazard_type=hazard, containment_level=level))
    assert result.subtotal > 0
    assert result.total >= result.subtotal
    assert {LineItemType.LABOR, LineItemType.EQUIPMENT, LineItemType.MATERIAL, LineItemType.DISPOSAL} <= {
        i.item_type for i in result.line_items
    }


def test_measurement_fallback_matches_direct_area(rate_tables):
    """linear_ft=200 prices the same as a 400 sqft survey, whatever the volume says."""
    calculator = _calculator(rate_tables)
    measured = calculator.calculate_from_survey(_survey(area_sqft=None, linear_ft=200, volume_cuft=1600))
    direct = calculator.calculate_from_survey(_survey(area_sqft=400))
    volume_only = calculator.calculate_from_survey(_survey(area_sqft=None, volume_cuft=1600))
    assert measured.effective_area_sqft == 400.0
    assert measured.subtotal == direct.subtotal
    assert volume_only.effective_area_sqft == 200.0
    assert measured.subtotal > volume_only.subtotal


def test_missing_containment_level_treated_as_level_1(rate_tables):
    calculator = _calculator(rate_tables)
    unset = calculator.calculate_from_survey(_survey(containment_level=None))
    level_1 = calculator.calculate_from_survey(_survey(containment_level=1))
    assert unset.total == level_1.total


# ============================================================
# 16-19. Rate table loading
# ============================================================

def test_rate_tables_loaded_once(rate_tables, survey):
    provider = StaticRateTableProvider(rate_tables)
    calculator = EstimateCalculator("org-123", provider)
    assert provider.load_count == 0, "Constructing a calculator should not fetch rates"

    calculator.calculate_from_survey(survey)
    calculator.calculate_from_survey(survey)
    assert provider.load_count == 1


def test_load_rate_tables_refreshes(rate_tables, survey):
    provider = StaticRateTableProvider(rate_tables)
    calculator = EstimateCalculator("org-123", provider)
    calculator.calculate_from_survey(survey)

    provider.tables = rate_tables.model_copy(update={"disposal_fees": []})
    assert calculator.calculate_from_survey(survey).subtotal == 72440.0, "Cached tables still in use"

    calculator.load_rate_tables()
    assert provider.load_count == 2
    assert _category_total(calculator.calculate_from_survey(survey), LineItemType.DISPOSAL) == 0


def test_inactive_rates_ignored(rate_tables, survey):
    hepa = next(r for r in rate_tables.equipment_rates if r.name == "HEPA Vacuum")
    hepa.is_active = False
    result = _calculator(rate_tables).calculate_from_survey(survey)
    names = [i.description for i in result.line_items if i.item_type == LineItemType.EQUIPMENT]
    assert "HEPA Vacuum" not in names
    assert _category_total(result, LineItemType.EQUIPMENT) == 900.0


def test_unknown_org_gets_only_fixed_fee_categories(rate_tables):
    """No rates configured: only testing and permits (fixed schedules) survive."""
    provider = StaticRateTableProvider({"org-123": rate_tables})
    calculator = EstimateCalculator("org-999", provider)
    result = calculator.calculate_from_survey(_survey(organization_id="org-999"))

    assert {i.item_type for i in result.line_items} == {LineItemType.TESTING, LineItemType.PERMIT}
    assert result.subtotal == 1050.0
    assert result.markup_percent == 20.0
    assert result.total == 1260.0
    assert len(result.warnings) == 5


# ============================================================
# 20-22. Missing configuration
# ============================================================

def test_missing_category_warns_but_prices_the_rest(rate_tables, survey):
    tables = rate_tables.model_copy(update={"equipment_rates": []})
    result = _calculator(tables).calculate_from_survey(survey)
    assert _category_total(result, LineItemType.EQUIPMENT) == 0
    assert result.subtotal == 72440.0 - 1050.0
    assert len(result.warnings) == 1
    assert "equipment" in result.warnings[0]


def test_missing_travel_rates_warn_only_when_travel_enabled(rate_tables, survey):
    tables = rate_tables.model_copy(update={"travel_rates": []})
    calculator = _calculator(tables)
    assert any("travel" in w for w in calculator.calculate_from_survey(survey).warnings)
    assert calculator.calculate_from_survey(survey, CalculatorOptions(include_travel=False)).warnings == []


def test_travel_miles_option(rate_tables, survey):
    result = _calculator(rate_tables).calculate_from_survey(survey, CalculatorOptions(travel_miles=100))
    assert _category_total(result, LineItemType.TRAVEL) == 350.0


# ============================================================
# 23-26. Invalid surveys
# ============================================================

def test_survey_without_hazard_rejected(rate_tables):
    provider = StaticRateTableProvider(rate_tables)
    calculator = EstimateCalculator("org-123", provider)
    with pytest.raises(InvalidSurveyError, match="hazard_type"):
        calculator.calculate_from_survey(_survey(hazard_type=None))


def test_survey_from_other_org_rejected(rate_tables):
    with pytest.raises(InvalidSurveyError, match="org-456"):
        _calculator(rate_tables).calculate_from_survey(_survey(organization_id="org-456"))


def test_unmeasured_survey_uses_default_area(rate_tables):
    result = _calculator(rate_tables, default_area_sqft=100).calculate_from_survey(_survey(area_sqft=None))
    assert result.effective_area_sqft == 100.0


def test_unmeasured_survey_without_default_rejected(rate_tables):
    calculator = _calculator(rate_tables, default_area_sqft=None)
    with pytest.raises(InvalidSurveyError, match="no area_sqft"):
        calculator.calculate_from_survey(_survey(area_sqft=None))


# ============================================================
# 27-28. Helpers
# ============================================================

def test_create_estimate_calculator(rate_tables, survey):
    calculator = create_estimate_calculator("org-123", StaticRateTableProvider(rate_tables))
    assert calculator.organization_id == "org-123"
    assert calculator.calculate_from_survey(survey).total == 90550.0


def test_calculate_estimate_from_survey(rate_tables, survey):
    result = calculate_estimate_from_survey(survey, "org-123", StaticRateTableProvider(rate_tables))
    assert result.total == 90550.0


# ============================================================
# 29. Concurrent first use
# ============================================================

class _SlowProvider(StaticRateTableProvider):
    def load(self, organization_id):
        time.sleep(0.05)
        return super().load(organization_id)


def test_concurrent_first_use_loads_once(rate_tables):
    provider = _SlowProvider(rate_tables)
    calculator = EstimateCalculator("org-123", provider)
    start = threading.Barrier(8)
    seen = []

    def _price():
        start.wait()
        seen.append(calculator.calculate_from_survey(_survey()).total)

    threads = [threading.Thread(target=_price) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert provider.load_count == 1
    assert seen == [90550.0] * 8


# ============================================================
# 30-35. One configured category is enough for a positive total
# ============================================================

@pytest.mark.parametrize("category", ["labor_rates", "equipment_rates", "material_costs",
                                      "disposal_fees", "travel_rates"])
def test_single_configured_category_positive_total(rate_tables, category):
    tables = RateTables(**{category: getattr(rate_tables, category)})
    survey = _survey(clearance_required=False, regulatory_notifications_needed=False)
    result = _calculator(tables).calculate_from_survey(survey)
    assert result.total > 0


def test_mismatched_rows_still_priced():
    """Rows exist but none names this hazard: fall back instead of pricing zero."""
    survey = _survey(hazard_type="lead", clearance_required=False, regulatory_notifications_needed=False)
    options = CalculatorOptions(include_travel=False)

    equipment_only = RateTables(equipment_rates=[EquipmentRate(id=1, name="Air Scrubber", daily_rate=125)])
    result = _calculator(equipment_only).calculate_from_survey(survey, options)
    assert [i.description for i in result.line_items] == [rules.FALLBACK_EQUIPMENT]
    assert result.total > 0
    assert not any("equipment" in w for w in result.warnings)

    disposal_only = RateTables(disposal_fees=[DisposalFee(id=1, hazard_code="mold", unit_cost=150)])
    result = _calculator(disposal_only).calculate_from_survey(_survey(
        clearance_required=False, regulatory_notifications_needed=False,
    ), options)
    assert _category_total(result, LineItemType.DISPOSAL) == 7500.0
    assert not any("disposal" in w for w in result.warnings)


# ============================================================
# 36-40. Multi-hazard surveys
# ============================================================

def _multi_hazard_survey(**overrides):
    """Asbestos 1,000 sqft (EPA notification) + mold 500 sqft at level 1."""
    fields = {
        "hazard_type": None,
        "regulatory_notifications_needed": False,
        "hazard_assessments": [
            HazardAssessment(hazard_type="asbestos", area_sqft=1000, containment_level=2, permits_required=True),
            HazardAssessment(hazard_type="mold", area_sqft=500, containment_level=1),
        ],
    }
    fields.update(overrides)
    return _survey(**fields)


def test_each_assessed_hazard_priced(rate_tables):
    """
    asbestos: 48,750 labor + 1,050 equipment + 1,340 materials + 20,000 disposal + 450 testing + 600 permits
    mold:      7,000 labor +   620 equipment + 1,270.50 materials + 2,250 disposal + 525 testing
    travel:      250 once
    """
    result = _calculator(rate_tables).calculate_from_survey(_multi_hazard_survey())

    assert _category_total(result, LineItemType.LABOR) == 55750.0
    assert _category_total(result, LineItemType.EQUIPMENT) == 1670.0
    assert _category_total(result, LineItemType.MATERIAL) == 2610.5
    assert _category_total(result, LineItemType.DISPOSAL) == 22250.0
    assert _category_total(result, LineItemType.TESTING) == 975.0
    assert _category_total(result, LineItemType.PERMIT) == 600.0
    assert _category_total(result, LineItemType.TRAVEL) == 250.0
    assert result.subtotal == 84105.5
    assert result.effective_area_sqft == 1500.0


def test_multi_hazard_travel_once_and_ordered(rate_tables):
    result = _calculator(rate_tables).calculate_from_survey(_multi_hazard_survey())

    assert len([i for i in result.line_items if i.item_type == LineItemType.TRAVEL]) == 1
    assert len([i for i in result.line_items if i.item_type == LineItemType.DISPOSAL]) == 2
    order = list_categories()
    positions = [order.index(i.item_type) for i in result.line_items]
    assert positions == sorted(positions)
    assert [i.sort_order for i in result.line_items] == list(range(len(result.line_items)))


def test_assessment_falls_back_to_survey_fields(rate_tables):
    """An assessment with no area or level prices exactly like the flat survey."""
    calculator = _calculator(rate_tables)
    flat = calculator.calculate_from_survey(_survey())
    assessed = calculator.calculate_from_survey(_survey(
        hazard_type=None,
        hazard_assessments=[HazardAssessment(hazard_type="asbestos")],
    ))
    assert assessed.model_dump() == flat.model_dump()


def test_assessment_friable_and_waste_volume(rate_tables):
    result = _calculator(rate_tables).calculate_from_survey(_survey(
        hazard_assessments=[HazardAssessment(hazard_type="asbestos", friable=True, waste_volume_cuyd=20)],
    ))
    disposal = next(i for i in result.line_items if i.item_type == LineItemType.DISPOSAL)
    assert "asbestos_friable" in disposal.description
    assert disposal.quantity == 20.0
    assert disposal.total == 9000.0


def test_assessment_without_area_or_default_rejected(rate_tables):
    calculator = _calculator(rate_tables, default_area_sqft=None)
    survey = _survey(area_sqft=None, hazard_assessments=[HazardAssessment(hazard_type="mold")])
    with pytest.raises(InvalidSurveyError, match="no area_sqft"):
        calculator.calculate_from_survey(survey)
