"""
Estimate calculator — site survey + organization rate tables → priced estimate.

Pure math once the rate tables are loaded. Rate tables are fetched through a
RateTableProvider on first use and cached for the life of the calculator, so
one instance can price many surveys for the same organization.

Input: SiteSurvey + CalculatorOptions
Output: EstimateResult (line items in category order, subtotal, markup, total)
"""

import logging
import threading
from typing import List, Optional

from .calculators.base import (
    EstimateContext,
    InvalidSurveyError,
    resolve_effective_area,
    round_currency,
    total_of,
)
from .calculators.registry import get_generator, is_job_level, list_categories
from .config import settings
from .models import LineItemType
from .rate_tables import RateTableProvider
from .schemas import (
    CalculatorOptions,
    EstimateLineItem,
    EstimateResult,
    PricingSetting,
    RateTables,
    SiteSurvey,
)

logger = logging.getLogger(__name__)

# Categories every estimate should have: an empty one means missing configuration
_EXPECTED_CATEGORIES = {
    LineItemType.LABOR: "labor_rates",
    LineItemType.EQUIPMENT: "equipment_rates",
    LineItemType.MATERIAL: "material_costs",
    LineItemType.DISPOSAL: "disposal_fees",
}


class EstimateCalculator:
    """
    Prices site surveys for one organization.

    Not tied to any survey: the only instance state is the cached rate tables,
    which are read-only once loaded.
    """

    def __init__(
        self,
        organization_id: str,
        provider: RateTableProvider,
        default_markup_percent: Optional[float] = None,
        default_area_sqft: Optional[float] = settings.DEFAULT_AREA_SQFT,
    ):
        self.organization_id = organization_id
        self.provider = provider
        self.default_markup_percent = (
            default_markup_percent if default_markup_percent is not None
            else settings.DEFAULT_MARKUP_PERCENT
        )
        self.default_area_sqft = default_area_sqft
        self._rate_tables: Optional[RateTables] = None
        self._load_lock = threading.Lock()

    # --- Rate tables ---

    def load_rate_tables(self) -> RateTables:
        """Fetch the organization's rate tables now, replacing any cached copy."""
        tables = self.provider.load(self.organization_id).only_active()
        self._rate_tables = tables
        return tables

    @property
    def rate_tables(self) -> RateTables:
        """Cached rate tables — fetched once, on first access."""
        if self._rate_tables is None:
            with self._load_lock:
                if self._rate_tables is None:
                    self.load_rate_tables()
        return self._rate_tables

    # --- Calculation ---

    def calculate_from_survey(
        self,
        survey: SiteSurvey,
        options: Optional[CalculatorOptions] = None,
    ) -> EstimateResult:
        """
        Build a fully itemized estimate for one survey.

        A survey with hazard_assessments is priced once per assessed hazard,
        grouped by category; travel is priced once for the whole job.

        Raises InvalidSurveyError (before any line item is generated) when the
        survey has no hazard type, belongs to another organization, or has no
        measurements and this calculator has no default area.
        Missing rate configuration never raises. The category is left out
        and a warning is added to the result.
        """
        options = options or CalculatorOptions()
        self._validate(survey)
        contexts = self.build_contexts(survey, options)

        line_items = []
        for item_type in list_categories():
            generate = get_generator(item_type)
            if is_job_level(item_type):
                line_items.extend(generate(contexts[0]))
                continue
            for ctx in contexts:
                line_items.extend(generate(ctx))
        for sort_order, item in enumerate(line_items):
            item.sort_order = sort_order

        area_sqft = sum(ctx.area_sqft for ctx in contexts)
        warnings = configuration_warnings(line_items, options)
        result = compute_totals(
            line_items,
            contexts[0].rates.pricing_settings,
            options,
            self.default_markup_percent,
            effective_area_sqft=area_sqft,
            warnings=warnings,
        )

        logger.info(
            "Estimate for survey %s (org %s): %s, %.1f sqft → %d items, "
            "subtotal %.2f, markup %.1f%%, total %.2f",
            survey.id, self.organization_id,
            ", ".join(f"{ctx.hazard} level {ctx.containment_level}" for ctx in contexts),
            area_sqft, len(line_items), result.subtotal, result.markup_percent, result.total,
        )
        return result

    def build_contexts(self, survey: SiteSurvey, options: CalculatorOptions) -> List[EstimateContext]:
        """One context per hazard priced: each assessment, or the survey's own hazard_type."""
        rates = self.rate_tables
        travel_miles = (
            options.travel_miles if options.travel_miles is not None
            else settings.DEFAULT_TRAVEL_MILES
        )
        survey_area = None

        if not survey.hazard_assessments:
            return [EstimateContext(
                survey=survey,
                hazard=survey.hazard_type.value,
                containment_level=survey.containment_level or 1,
                area_sqft=resolve_effective_area(survey, self.default_area_sqft),
                rates=rates,
                options=options,
                travel_miles=travel_miles,
                friable=survey.friable,
                permits_required=survey.regulatory_notifications_needed,
            )]

        contexts = []
        for assessment in survey.hazard_assessments:
            if assessment.area_sqft and assessment.area_sqft > 0:
                area_sqft = float(assessment.area_sqft)
            else:
                if survey_area is None:
                    survey_area = resolve_effective_area(survey, self.default_area_sqft)
                area_sqft = survey_area
            contexts.append(EstimateContext(
                survey=survey,
                hazard=assessment.hazard_type.value,
                containment_level=assessment.containment_level or survey.containment_level or 1,
                area_sqft=area_sqft,
                rates=rates,
                options=options,
                travel_miles=travel_miles,
                waste_volume_cuyd=assessment.waste_volume_cuyd,
                friable=assessment.friable if assessment.friable is not None else survey.friable,
                permits_required=assessment.permits_required or survey.regulatory_notifications_needed,
            ))
        return contexts

    def _validate(self, survey: SiteSurvey) -> None:
        if survey.hazard_type is None and not survey.hazard_assessments:
            raise InvalidSurveyError(f"Survey {survey.id or '(unsaved)'} has no hazard_type")
        if survey.organization_id and survey.organization_id != self.organization_id:
            raise InvalidSurveyError(
                f"Survey {survey.id or '(unsaved)'} belongs to organization "
                f"{survey.organization_id}, not {self.organization_id}"
            )


def configuration_warnings(line_items: List[EstimateLineItem], options: CalculatorOptions) -> List[str]:
    """One warning per expected category that came back empty."""
    present = {item.item_type for item in line_items}
    expected = dict(_EXPECTED_CATEGORIES)
    if options.include_travel:
        expected[LineItemType.TRAVEL] = "travel_rates"

    warnings = []
    for item_type, table in expected.items():
        if item_type not in present:
            message = (
                f"No {item_type.value} line items, check the organization's "
                f"active {table} configuration"
            )
            logger.warning(message)
            warnings.append(message)
    return warnings


def resolve_markup_percent(
    options: CalculatorOptions,
    pricing_settings: Optional[PricingSetting],
    default_markup_percent: float,
) -> float:
    """custom markup → organization default → calculator default."""
    if options.custom_markup is not None:
        return options.custom_markup
    if pricing_settings and pricing_settings.default_markup_percent is not None:
        return pricing_settings.default_markup_percent
    return default_markup_percent


def compute_totals(
    line_items: List[EstimateLineItem],
    pricing_settings: Optional[PricingSetting],
    options: CalculatorOptions,
    default_markup_percent: float,
    effective_area_sqft: float,
    warnings: Optional[List[str]] = None,
) -> EstimateResult:
    """
    subtotal = sum of included line totals
    markup   = subtotal × markup%
    discount = (subtotal + markup) × discount%   (capped at the organization maximum)
    tax      = (subtotal + markup − discount) × tax%
    total    = subtotal + markup − discount + tax

    Every money field is rounded to cents before it is used downstream.
    """
    warnings = list(warnings or [])
    subtotal = total_of(line_items)

    markup_percent = resolve_markup_percent(options, pricing_settings, default_markup_percent)
    minimum_markup = pricing_settings.minimum_markup_percent if pricing_settings else None
    if options.custom_markup is not None and minimum_markup is not None and markup_percent < minimum_markup:
        message = f"Custom markup {markup_percent:g}% is below the organization minimum of {minimum_markup:g}%"
        logger.warning(message)
        warnings.append(message)
    markup_amount = round_currency(subtotal * markup_percent / 100.0)

    discount_percent = options.discount_percent
    maximum_discount = pricing_settings.maximum_discount_percent if pricing_settings else None
    if maximum_discount is not None and discount_percent > maximum_discount:
        message = f"Discount {discount_percent:g}% capped at the organization maximum of {maximum_discount:g}%"
        logger.warning(message)
        warnings.append(message)
        discount_percent = maximum_discount
    discount_amount = round_currency((subtotal + markup_amount) * discount_percent / 100.0)

    tax_percent = options.tax_percent
    tax_amount = round_currency((subtotal + markup_amount - discount_amount) * tax_percent / 100.0)

    total = round_currency(subtotal + markup_amount - discount_amount + tax_amount)

    return EstimateResult(
        line_items=line_items,
        effective_area_sqft=round_currency(effective_area_sqft),
        subtotal=subtotal,
        markup_percent=markup_percent,
        markup_amount=markup_amount,
        discount_percent=discount_percent,
        discount_amount=discount_amount,
        tax_percent=tax_percent,
        tax_amount=tax_amount,
        total=total,
        warnings=warnings,
    )


def create_estimate_calculator(organization_id: str, provider: RateTableProvider) -> EstimateCalculator:
    """Create a calculator for one organization."""
    return EstimateCalculator(organization_id, provider)


def calculate_estimate_from_survey(
    survey: SiteSurvey,
    organization_id: str,
    provider: RateTableProvider,
    options: Optional[CalculatorOptions] = None,
) -> EstimateResult:
    """One-off calculation without keeping a calculator around."""
    return EstimateCalculator(organization_id, provider).calculate_from_survey(survey, options)
