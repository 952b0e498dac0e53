from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    The leave API speaks camelCase JSON; attributes stay snake_case.
    Numeric ids are kept as strings.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, coerce_numbers_to_str=True)

    def to_api(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
