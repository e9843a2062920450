"""Internal identifiers.

``UserId`` is the system-assigned primary key of an identity record. It never
leaves the service; clients only ever see the ``PublicId``.
"""

from typing import NewType
from uuid import UUID

UserId = NewType("UserId", UUID)
