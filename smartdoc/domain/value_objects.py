"""
Value Objects - Immutable objects that represent domain concepts.
These have no identity and are compared by value.
"""
from typing import NewType

DocumentId = NewType("DocumentId", str)
ConflictId = NewType("ConflictId", str)
UserId = NewType("UserId", str)
AccessToken = NewType("AccessToken", str)
