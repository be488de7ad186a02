# organic_store/schemas/common.py
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base for request/response schemas.

    - camelCase on the wire (productId, couponCode, ...)
    - snake_case accepted on input and used in Python code
    - can be built straight from ORM rows (from_attributes)
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageResponse(ApiModel):
    success: bool = True
    message: str
