from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

# Decimal strings with up to 2 decimal places (money); NUMERIC(12,2) holds 10 integer digits
MONEY_PATTERN = r"^-?\d{1,10}(\.\d{1,2})?$"
# Non-negative fractions such as 0.9455; NUMERIC(8,6) holds 2 integer digits
FRACTION_PATTERN = r"^\d{1,2}(\.\d{1,6})?$"

MAX_QUANTITY = 9999


class CamelModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
