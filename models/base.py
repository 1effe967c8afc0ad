from sqlalchemy import Enum
from sqlalchemy.orm import DeclarativeBase, declared_attr


class Base(DeclarativeBase):
     """
     Base class for all SQLAlchemy models.
     Provides common configuration and mixins.
     """

     @declared_attr.directive
     def __tablename__(cls) -> str:
          """
          Automatically generate table name from class name.
          Example: PropertyManager -> property_managers
          """
          import re
          name = re.sub(r'(?<!^)(?=[A-Z])', '_', cls.__name__).lower()
          # Pluralize (simple version)
          if name.endswith('y'):
               return name[:-1] + 'ies'
          elif name.endswith('s'):
               return name + 'es'
          return name + 's'


def enum_type(enum_cls, name: str) -> Enum:
     """
     Column type for a str enum, persisted by value ('in_progress') rather
     than by member name ('IN_PROGRESS').
     """
     return Enum(
          enum_cls,
          name=name,
          create_constraint=True,
          native_enum=False,
          validate_strings=True,
          values_callable=lambda members: [m.value for m in members],
     )
