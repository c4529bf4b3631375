from dataclasses import asdict, dataclass, fields, replace
from typing import Any, Mapping

from invoice_fraud.fields.exceptions import InvalidFieldSetError


def _to_camel(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


@dataclass(frozen=True)
class FieldSet:
    """Flat invoice field record over the fixed vocabulary.

    Every value is a string; an empty string means the field is absent.
    External keys (JSON, AI contract, indicators) are the camelCase names
    returned by `field_names()`.
    """

    # Financial
    total_cost: str = ""
    deposit: str = ""
    trade_in_value: str = ""
    balance_owing: str = ""
    purchase_price: str = ""
    gst_amount: str = ""
    # Vehicle
    asset_type: str = ""
    body_type: str = ""
    vehicle_make: str = ""
    vehicle_model: str = ""
    vehicle_year: str = ""
    transmission: str = ""
    fuel_type: str = ""
    color: str = ""
    engine_number: str = ""
    odometer: str = ""
    # Identification
    vin: str = ""
    nvic: str = ""
    registration: str = ""
    state: str = ""
    # Vendor & invoice
    vendor_name: str = ""
    vendor_abn: str = ""
    purchase_date: str = ""
    invoice_number: str = ""
    phone: str = ""
    email: str = ""
    postcode: str = ""
    # Customer
    deliver_to: str = ""
    # Bank
    bank_name: str = ""
    account_name: str = ""
    bsb: str = ""
    account_number: str = ""
    payment_reference: str = ""

    @classmethod
    def field_names(cls) -> list[str]:
        """External (camelCase) names of every field, in declaration order."""
        return list(_ATTRIBUTE_BY_KEY)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "FieldSet":
        """Build a FieldSet from camelCase keys.

        None becomes an empty string; values are stripped.

        Raises:
            InvalidFieldSetError: on unknown keys or non-string values.
        """
        return cls().with_updates(**data)

    def with_updates(self, **changes: Any) -> "FieldSet":
        """Return a copy with the given camelCase fields replaced.

        Raises:
            InvalidFieldSetError: on unknown keys or non-string values.
        """
        unknown = sorted(key for key in changes if key not in _ATTRIBUTE_BY_KEY)
        if unknown:
            raise InvalidFieldSetError(f"Unknown invoice fields: {unknown}")
        updates: dict[str, str] = {}
        for key, value in changes.items():
            if value is None:
                value = ""
            if not isinstance(value, str):
                raise InvalidFieldSetError(
                    f"Field '{key}' must be a string or null, got {type(value).__name__}"
                )
            updates[_ATTRIBUTE_BY_KEY[key]] = value.strip()
        return replace(self, **updates)

    def get(self, key: str) -> str:
        """Value of a camelCase field."""
        return str(getattr(self, _ATTRIBUTE_BY_KEY[key]))

    def present(self) -> dict[str, str]:
        """Non-empty fields keyed by camelCase name."""
        return {key: value for key, value in self.to_dict().items() if value}

    def to_dict(self) -> dict[str, str]:
        return {_to_camel(name): value for name, value in asdict(self).items()}


_ATTRIBUTE_BY_KEY: dict[str, str] = {_to_camel(f.name): f.name for f in fields(FieldSet)}
