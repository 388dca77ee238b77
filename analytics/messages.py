# krishi_trends/analytics/messages.py
#
# Locale-dependent text for prediction reasoning and chart date labels.
# Only template selection happens here; no numbers are computed.

from datetime import date
from typing import Dict

from schemas.detection import SUPPORTED_LOCALES

REASONING_TEMPLATES: Dict[str, Dict[str, str]] = {
    "en": {
        "rising": "Rising trend observed in last {days} days. ",
        "rising_high": "Immediate attention required.",
        "rising_other": "Inspect regularly.",
        "falling": "Disease impact is decreasing. Maintain caution.",
        "stable": "Stable condition. Check crops regularly.",
    },
    "ne": {
        "rising": "पछिल्लो {days} दिनमा बढ्दो प्रवृत्ति देखिएको छ। ",
        "rising_high": "तत्काल सावधानी आवश्यक।",
        "rising_other": "नियमित निरीक्षण गर्नुहोस्।",
        "falling": "रोगको प्रभाव घट्दै गइरहेको छ। सावधानी जारी राख्नुहोस्।",
        "stable": "स्थिर अवस्थामा छ। नियमित बाली जाँच गर्नुहोस्।",
    },
}

_MONTHS = {
    "en": ["Jan", "Feb", "Mar", "Apr", "May", "Jun",
           "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"],
    "ne": ["जनवरी", "फेब्रुअरी", "मार्च", "अप्रिल", "मे", "जुन",
           "जुलाई", "अगस्ट", "सेप्टेम्बर", "अक्टोबर", "नोभेम्बर", "डिसेम्बर"],
}

_DEVANAGARI_DIGITS = str.maketrans("0123456789", "०१२३४५६७८९")


def check_locale(locale: str) -> str:
    if locale not in SUPPORTED_LOCALES:
        raise ValueError(f"Unsupported locale {locale!r}; expected one of {SUPPORTED_LOCALES}.")
    return locale


def build_reasoning(trend: str, risk_level: str, lookback_days: int, locale: str = "en") -> str:
    """Picks the reasoning sentence for a (trend, risk) pair in the given locale."""
    templates = REASONING_TEMPLATES[check_locale(locale)]
    if trend == "rising":
        suffix = templates["rising_high"] if risk_level == "high" else templates["rising_other"]
        return templates["rising"].format(days=lookback_days) + suffix
    return templates[trend]


def format_day_label(day: date, locale: str = "en") -> str:
    """Short month-day label, e.g. 'Oct 19' or 'अक्टोबर १९'."""
    month = _MONTHS[check_locale(locale)][day.month - 1]
    label = f"{month} {day.day}"
    return label.translate(_DEVANAGARI_DIGITS) if locale == "ne" else label
