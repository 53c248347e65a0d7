"""
Column factories shared by the table models
"""

from enum import Enum
from typing import Type

from sqlalchemy import Column, DateTime
from sqlalchemy import Enum as SAEnum


def enum_column(enum_cls: Type[Enum], type_name: str, nullable: bool = False, index: bool = True) -> Column:
    """Enum column stored by value ('pending', not 'PENDING') in the named type"""
    return Column(
        SAEnum(
            enum_cls,
            name=type_name,
            values_callable=lambda members: [member.value for member in members],
        ),
        nullable=nullable,
        index=index,
    )


def timestamp_column(nullable: bool = False, index: bool = False) -> Column:
    return Column(DateTime(timezone=True), nullable=nullable, index=index)
