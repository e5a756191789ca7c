from typing import Optional

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SheetsImportIn(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)
    spreadsheet_id: Optional[str] = None
    range: Optional[str] = None
