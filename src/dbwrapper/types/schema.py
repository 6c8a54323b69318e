"""Schema metadata types.

Column descriptions are loaded once per schema refresh and shared by
every reader of the cache, so they are frozen.
"""

from typing import Optional

from pydantic import ConfigDict, Field

from dbwrapper.types.base import DbWrapperBaseModel


class ColumnMetadata(DbWrapperBaseModel):
    """Description of one column of a table.

    Attributes:
        name: Column name as reported by the database
        data_type: Native data type name (e.g. 'nvarchar', 'int')
        max_length: Maximum character length, None when not applicable
        nullable: Whether the column accepts NULL
        is_primary_key: Whether the column participates in the primary key
    """
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    data_type: str = Field(default="")
    max_length: Optional[int] = Field(default=None)
    nullable: bool = Field(default=True)
    is_primary_key: bool = Field(default=False)
