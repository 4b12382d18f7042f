"""Uniform success envelope returned by every action."""

from typing import Generic, Literal, TypeVar

from .document import ActionModel

DataT = TypeVar("DataT")


class ActionResult(ActionModel, Generic[DataT]):
    """``{"success": true, "data": ...}``. Failures are raised, never returned."""

    success: Literal[True] = True
    data: DataT
