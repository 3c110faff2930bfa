"""
Business rules for estimate generation — lookup tables per category.

Every curve here is organization policy, not physics. Keep each table
non-decreasing in containment level (stricter containment never costs less)
so estimates stay monotonic in area and containment.

Keys are HazardType values; containment levels are 1-4.
"""

# --- Area resolution ---
LINEAR_FT_BAND_WIDTH = 2.0    # linear footage worked as a 2 ft wide band
VOLUME_WORKING_HEIGHT = 8.0   # volume spread over a nominal 8 ft height


# --- Labor ---
# Labor hours per square foot by hazard type and containment level
LABOR_HOURS_PER_SQFT = {
    "asbestos": {1: 0.15, 2: 0.25, 3: 0.35, 4: 0.5},
    "mold": {1: 0.1, 2: 0.2, 3: 0.3, 4: 0.4},
    "lead": {1: 0.12, 2: 0.22, 3: 0.32, 4: 0.42},
    "vermiculite": {1: 0.2, 2: 0.3, 3: 0.4, 4: 0.5},
    "other": {1: 0.1, 2: 0.2, 3: 0.3, 4: 0.4},
}

# Crew size by containment level: one supervisor, the rest technicians
CREW_SIZE_BY_CONTAINMENT = {
    1: 2,
    2: 3,
    3: 4,
    4: 5,
}

SUPERVISOR_KEYWORDS = ("supervisor", "foreman", "manager")
TECHNICIAN_KEYWORDS = ("technician", "worker", "laborer")


# --- Equipment ---
# Base equipment by hazard type: HEPA vacuum is always first
EQUIPMENT_BY_HAZARD = {
    "asbestos": ["HEPA Vacuum", "Negative Air Machine", "Decontamination Unit", "Air Monitoring Equipment"],
    "mold": ["HEPA Vacuum", "Air Scrubber", "Dehumidifier", "Moisture Meter"],
    "lead": ["HEPA Vacuum", "Lead Test Kit", "Encapsulation Sprayer"],
    "vermiculite": ["HEPA Vacuum", "Negative Air Machine", "Containment Materials"],
    "other": ["HEPA Vacuum", "Air Scrubber"],
}

# Engineering controls added on top of the hazard list at stricter containment
EQUIPMENT_BY_CONTAINMENT = {
    1: [],
    2: [],
    3: ["Negative Air Machine"],
    4: ["Negative Air Machine", "Decontamination Unit", "Air Monitoring Equipment"],
}

# Square feet of work area completed per day: drives rental duration
EQUIPMENT_SQFT_PER_DAY = {
    1: 800.0,
    2: 600.0,
    3: 400.0,
    4: 300.0,
}
MIN_EQUIPMENT_DAYS = 2

# Priced at any available rate when none of the listed equipment is configured
FALLBACK_EQUIPMENT = "HEPA Vacuum"

# Daily-equivalent conversion when an equipment rate has no daily_rate
HOURS_PER_DAY = 8.0
DAYS_PER_WEEK = 7.0
DAYS_PER_MONTH = 30.0


# --- Materials ---
# Consumables per square foot of effective area
MATERIALS_BY_HAZARD = {
    "asbestos": [
        {"name": "Poly Sheeting (6 mil)", "qty_per_sqft": 1.5},
        {"name": "Duct Tape", "qty_per_sqft": 0.1},
        {"name": "Disposal Bags (6 mil)", "qty_per_sqft": 0.02},
        {"name": "Warning Labels", "qty_per_sqft": 0.01},
        {"name": "Tyvek Suits", "qty_per_sqft": 0.005},
        {"name": "Respirator Filters", "qty_per_sqft": 0.01},
    ],
    "mold": [
        {"name": "Poly Sheeting (6 mil)", "qty_per_sqft": 1.2},
        {"name": "Antimicrobial Solution", "qty_per_sqft": 0.05},
        {"name": "HEPA Filters", "qty_per_sqft": 0.001},
        {"name": "Tyvek Suits", "qty_per_sqft": 0.003},
    ],
    "lead": [
        {"name": "Poly Sheeting (6 mil)", "qty_per_sqft": 1.0},
        {"name": "Lead Encapsulant", "qty_per_sqft": 0.02},
        {"name": "Disposal Bags", "qty_per_sqft": 0.015},
        {"name": "Tyvek Suits", "qty_per_sqft": 0.004},
    ],
    "vermiculite": [
        {"name": "Poly Sheeting (6 mil)", "qty_per_sqft": 1.5},
        {"name": "Disposal Bags (6 mil)", "qty_per_sqft": 0.03},
        {"name": "Warning Labels", "qty_per_sqft": 0.01},
    ],
    "other": [
        {"name": "Poly Sheeting (4 mil)", "qty_per_sqft": 1.0},
        {"name": "Disposal Bags", "qty_per_sqft": 0.01},
    ],
}


# --- Disposal ---
# Waste volume in cubic yards per square foot of effective area
DISPOSAL_CUYD_PER_SQFT = {
    "asbestos": 0.05,
    "mold": 0.03,
    "lead": 0.02,
    "vermiculite": 0.08,
    "other": 0.02,
}

# Disposal fee code by hazard type and containment level.
# Asbestos at full containment is treated as friable unless the survey says otherwise.
DISPOSAL_CODE_BY_HAZARD = {
    "asbestos": {1: "asbestos_non_friable", 2: "asbestos_non_friable", 3: "asbestos_friable", 4: "asbestos_friable"},
    "mold": {1: "mold", 2: "mold", 3: "mold", 4: "mold"},
    "lead": {1: "lead", 2: "lead", 3: "lead", 4: "lead"},
    "vermiculite": {1: "asbestos_non_friable", 2: "asbestos_non_friable", 3: "asbestos_non_friable", 4: "asbestos_non_friable"},
    "other": {1: "other", 2: "other", 3: "other", 4: "other"},
}
FALLBACK_DISPOSAL_CODE = "other"

# Waste volume unit conversion: multiply cubic yards by this factor
DISPOSAL_UNIT_FACTORS = {
    "cubic yard": 1.0,
    "cubic yards": 1.0,
    "cuyd": 1.0,
    "cy": 1.0,
    "yd3": 1.0,
    "cubic foot": 27.0,
    "cubic feet": 27.0,
    "cuft": 27.0,
    "ft3": 27.0,
}


# --- Testing / clearance ---
TESTING_BY_HAZARD = {
    "asbestos": {"name": "Air Clearance Testing (PCM)", "cost_per_sample": 150.00},
    "mold": {"name": "Post-Remediation Verification", "cost_per_sample": 175.00},
    "lead": {"name": "Lead Clearance Testing", "cost_per_sample": 125.00},
    "vermiculite": {"name": "Air Clearance Testing", "cost_per_sample": 150.00},
    "other": {"name": "Environmental Testing", "cost_per_sample": 100.00},
}
SQFT_PER_SAMPLE = 500.0
MIN_SAMPLES = 3


# --- Permits / regulatory notifications ---
PERMITS_BY_HAZARD = {
    "asbestos": [
        {"name": "EPA Notification", "cost": 350.00},
        {"name": "State Permit Fee", "cost": 250.00},
    ],
    "mold": [
        {"name": "Local Permit", "cost": 150.00},
    ],
    "lead": [
        {"name": "EPA RRP Notification", "cost": 200.00},
        {"name": "State Permit Fee", "cost": 175.00},
    ],
    "vermiculite": [
        {"name": "EPA Notification", "cost": 350.00},
    ],
    "other": [
        {"name": "General Permit", "cost": 100.00},
    ],
}


def equipment_for(hazard, containment_level):
    # type: (str, int) -> list
    """Equipment names for a job, hazard list first, duplicates dropped."""
    names = []
    for name in EQUIPMENT_BY_HAZARD.get(hazard, EQUIPMENT_BY_HAZARD["other"]) + \
            EQUIPMENT_BY_CONTAINMENT.get(containment_level, []):
        if name not in names:
            names.append(name)
    return names


def disposal_code_for(hazard, containment_level, friable=None):
    # type: (str, int, object) -> str
    """Map a survey hazard to the disposal fee code it is billed under."""
    if hazard == "asbestos" and friable is not None:
        return "asbestos_friable" if friable else "asbestos_non_friable"
    by_level = DISPOSAL_CODE_BY_HAZARD.get(hazard)
    if not by_level:
        return FALLBACK_DISPOSAL_CODE
    return by_level.get(containment_level, FALLBACK_DISPOSAL_CODE)
