"""Static lookup tables used by the engines.

Tables are versioned data rather than logic: swap a table here to move to a
new tax year or a revised duty schedule.
"""

# 2024-25 resident rates. (low, high, base, rate): tax = base + rate * (income - low) for low < income <= high
INCOME_TAX_BRACKETS = [
    (0.0, 18200.0, 0.0, 0.0),
    (18200.0, 45000.0, 0.0, 0.16),
    (45000.0, 135000.0, 4288.0, 0.30),
    (135000.0, 190000.0, 31288.0, 0.37),
    (190000.0, float("inf"), 51638.0, 0.45),
]

# Low income tax offset; the rate reduces the offset as income rises
TAX_OFFSET_BRACKETS = [
    (0.0, 37500.0, 700.0, 0.0),
    (37500.0, 45000.0, 700.0, -0.05),
    (45000.0, 66667.0, 325.0, -0.015),
    (66667.0, float("inf"), 0.0, 0.0),
]

# Medicare levy with the low income shade-in
LEVY_BRACKETS = [
    (0.0, 27222.0, 0.0, 0.0),
    (27222.0, 34027.0, 0.0, 0.10),
    (34027.0, float("inf"), 680.54, 0.02),
]

INCOME_SHADING = {"base": 0.9, "supplementary": 0.8, "other": 0.8, "rental": 0.8}

FREQUENCY_PER_YEAR = {"weekly": 52, "fortnightly": 26, "monthly": 12, "yearly": 1}

LVR_BAND_LIMITS = {
    "0-50": (0.0, 0.50),
    "50-60": (0.50, 0.60),
    "60-70": (0.60, 0.70),
    "70-80": (0.70, 0.80),
    "80-85": (0.80, 0.85),
}

HEM_METRO_LOCATION_ID = 1
HEM_MAX_DEPENDENTS = 3
HEM_DEFAULT_WEEKLY = {"single": 450.0, "married": 650.0}

LEGAL_FEES = 1500.0
OTHER_COSTS_PCT = 0.001
MIN_OTHER_COSTS = 1500.0

DEFAULT_STATE = "NSW"

# Each state: ordered thresholds (min, max, rate, base) plus first home buyer
# and foreign purchaser rules. ``concession`` is None for exemption-only states.
STAMP_DUTY_TABLES = {
    "NSW": {
        "thresholds": [
            (0, 30000, 0.0125, 0),
            (30000, 1179999, 0.015, 375),
            (1179999, 1455000, 0.045, 17805),
            (1455000, 3040999, 0.05, 30393),
            (3040999, None, 0.055, 109984),
        ],
        "fhb": {"exemption": 800000, "concession": 1000000},
        "foreign_surcharge": 0.08,
    },
    "VIC": {
        "thresholds": [
            (0, 100000, 0.014, 0),
            (100000, 375000, 0.02, 1400),
            (375000, 600000, 0.05, 8750),
            (600000, 960000, 0.055, 20000),
            (960000, None, 0.065, 39800),
        ],
        "fhb": {"exemption": 600000, "concession": 750000},
        "foreign_surcharge": 0.08,
    },
    "QLD": {
        "thresholds": [
            (0, 5000, 0.0, 0),
            (5000, 75000, 0.015, 0),
            (75000, 540000, 0.035, 1050),
            (540000, 1000000, 0.045, 17325),
            (1000000, None, 0.0575, 38025),
        ],
        "fhb": {"exemption": 550000, "concession": None},
        "foreign_surcharge": 0.075,
    },
    "WA": {
        "thresholds": [
            (0, 120000, 0.019, 0),
            (120000, 150000, 0.028, 2280),
            (150000, 360000, 0.034, 3120),
            (360000, 725000, 0.045, 10320),
            (725000, None, 0.051, 26870),
        ],
        "fhb": {"exemption": 430000, "concession": 530000},
        "foreign_surcharge": 0.07,
    },
    "SA": {
        "thresholds": [
            (0, 12000, 0.0, 0),
            (12000, 30000, 0.01, 0),
            (30000, 50000, 0.02, 180),
            (50000, 100000, 0.03, 580),
            (100000, 200000, 0.035, 2080),
            (200000, 250000, 0.04, 5580),
            (250000, 300000, 0.045, 7580),
            (300000, 500000, 0.05, 9830),
            (500000, None, 0.055, 19830),
        ],
        "fhb": None,
        "foreign_surcharge": 0.07,
    },
    "TAS": {
        "thresholds": [
            (0, 3000, 0.0, 0),
            (3000, 25000, 0.0175, 50),
            (25000, 75000, 0.0225, 435),
            (75000, 200000, 0.0275, 1560),
            (200000, 375000, 0.035, 5935),
            (375000, 725000, 0.04, 12935),
            (725000, None, 0.045, 26935),
        ],
        "fhb": None,
        "foreign_surcharge": 0.08,
    },
    "ACT": {
        "thresholds": [
            (0, 200000, 0.006, 0),
            (200000, 300000, 0.023, 1200),
            (300000, 500000, 0.04, 3500),
            (500000, 750000, 0.055, 11500),
            (750000, 1000000, 0.0575, 25250),
            (1000000, 1455000, 0.06, 39625),
            (1455000, None, 0.07, 66925),
        ],
        "fhb": {"exemption": 585000, "concession": 930000},
        "foreign_surcharge": 0.0,
    },
    "NT": {
        "thresholds": [
            (0, 525000, 0.0, 0),
            (525000, 3000000, 0.049, 0),
            (3000000, None, 0.059, 121275),
        ],
        "fhb": {"exemption": 650000, "concession": None},
        "foreign_surcharge": 0.0,
    },
}
