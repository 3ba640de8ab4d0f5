"""
Preference Validator — checks diet, spice and delivery-time choices.

All three fields are checked before returning so the caller sees every
bad field in one response.
"""

from dataclasses import dataclass, field

from models.subscription import DietType, SpiceLevel, DeliveryTime


PREFERENCE_RULES = (
    ("dietType", DietType, "dietType must be veg or non-veg"),
    ("spiceLevel", SpiceLevel, "spiceLevel must be mild, medium, or spicy"),
    ("deliveryTime", DeliveryTime, "deliveryTime must be breakfast, lunch, or dinner"),
)


@dataclass
class PreferenceCheck:
    valid: bool
    values: dict = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)


def validate_preferences(preferences: dict | None) -> PreferenceCheck:
    """
    Validate a {dietType, spiceLevel, deliveryTime} mapping.

    Values are lower-cased before comparison. On success `values` holds
    the enum members keyed by field name; on failure `errors` lists one
    message per invalid field, in field order.
    """
    preferences = preferences or {}
    values: dict = {}
    errors: list[str] = []

    for field_name, enum_cls, message in PREFERENCE_RULES:
        raw = preferences.get(field_name)
        normalized = raw.lower() if isinstance(raw, str) else None
        try:
            values[field_name] = enum_cls(normalized)
        except ValueError:
            errors.append(message)

    if errors:
        return PreferenceCheck(valid=False, errors=errors)
    return PreferenceCheck(valid=True, values=values)
