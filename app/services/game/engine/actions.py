"""Game action types - explicit player inputs separated from match state."""

from typing import Annotated, Literal

from pydantic import BaseModel, Field

from app.schemas.game_engine import Direction


class BaseAction(BaseModel):
    player: int = Field(..., ge=1, le=2, description="Acting player (1 or 2)")


class RotateAction(BaseAction):
    """Turn a piece a quarter turn in place."""

    action_type: Literal["rotate"] = "rotate"
    x: int
    y: int
    clockwise: bool = True


class MoveAction(BaseAction):
    """Step a piece one cell orthogonally."""

    action_type: Literal["move"] = "move"
    from_x: int
    from_y: int
    to_x: int
    to_y: int


class PlaceAction(BaseAction):
    """Place a mirror from the player's reserve."""

    action_type: Literal["place"] = "place"
    x: int
    y: int
    facing: Direction = Direction.EAST


class SwapAction(BaseAction):
    """Exchange a dual mirror with its owner's emitter or royal."""

    action_type: Literal["swap"] = "swap"
    x: int = Field(..., description="Dual mirror column")
    y: int = Field(..., description="Dual mirror row")
    target_x: int
    target_y: int


# Union type for all game actions
GameAction = Annotated[
    RotateAction | MoveAction | PlaceAction | SwapAction,
    Field(discriminator="action_type"),
]

_ACTION_TYPES: dict[str, type[BaseAction]] = {
    "rotate": RotateAction,
    "move": MoveAction,
    "place": PlaceAction,
    "swap": SwapAction,
}


def build_action_from_payload(payload: dict) -> GameAction:
    """Build a typed action from a raw payload dict.

    Accepts flat payloads (``{"action_type": "move", "player": 1, "from_x": ...}``)
    as well as the nested wire shape ``{"action_type", "player", "params": {...}}``.

    Raises:
        ValueError: If action_type is missing or unknown, or params is not an object.
        pydantic.ValidationError: If fields are missing or malformed.
    """
    action_type = payload.get("action_type") or payload.get("type")
    if not isinstance(action_type, str) or action_type not in _ACTION_TYPES:
        raise ValueError(f"Unknown action type: {action_type!r}")
    action_cls = _ACTION_TYPES[action_type]

    params = payload.get("params") or {}
    if not isinstance(params, dict):
        raise ValueError(f"params must be an object, got {type(params).__name__}")

    data = {k: v for k, v in payload.items() if k not in ("params", "type")}
    data.update(params)
    data["action_type"] = action_type
    return action_cls.model_validate(data)
