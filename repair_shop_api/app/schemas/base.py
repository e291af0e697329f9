"""
Shared pydantic base classes.

Every payload exchanged with clients uses camelCase field names
(``customerName``, ``serialNumber`` ...) while Python code works with
snake_case attributes.  ``CamelModel`` wires the alias generator once so
request and response models agree on the wire format.
"""

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base model serialised with camelCase aliases."""

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "from_attributes": True,
    }


class CamelInputModel(CamelModel):
    """Base model for request bodies.

    Leading and trailing whitespace is stripped from strings before length
    constraints are checked, so ``"   "`` fails a ``min_length=1`` field.
    Unknown fields are ignored, which is how client-supplied values for
    server-managed fields (``status``, ``count`` ...) are discarded.
    """

    model_config = {
        "str_strip_whitespace": True,
        "extra": "ignore",
    }
