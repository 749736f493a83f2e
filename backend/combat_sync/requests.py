"""Typed mutation requests built from Socket.IO payloads.

Payload keys follow what the web client sends (``entityID``, ``barType``,
``imgSource`` ...). Anything missing or of the wrong type raises
InvalidInput so the gateway can reject it before touching the roster.
"""

import re
from dataclasses import dataclass
from typing import Any, Dict, Union

from combat_sync.errors import InvalidInput
from combat_sync.models import ALLIES, FOES, MAX_BAR_VALUE, STATUSES
from combat_sync.services.bars import VALUE_TYPES

VISIBLE_STATS = 'visible-stats'
ENTITY_STATES = STATUSES + (VISIBLE_STATS,)

BAR_SELECTORS = ('HP', 'MP', 'PE')
TEXT_FIELDS = ('name', 'conditions', 'imgSource')
_ENTITY_TYPES = {'ally': ALLIES, 'foe': FOES}

_BAR_MAX = re.compile(r'[0-9]{1,9}')


@dataclass(frozen=True)
class AddEntity:
    name: str
    hp_max: int
    mp_max: int
    pe_max: int
    affiliation: str
    img_source: str = ''

    @classmethod
    def from_payload(cls, payload: Any) -> 'AddEntity':
        data = _require_mapping(payload)
        entity_type = data.get('entityType')
        if entity_type not in _ENTITY_TYPES:
            raise InvalidInput(f"entityType must be 'ally' or 'foe', got {entity_type!r}")
        return cls(
            name=_require_str(data, 'name'),
            hp_max=parse_bar_max(data.get('hp'), 'hp'),
            mp_max=parse_bar_max(data.get('mp'), 'mp'),
            pe_max=parse_bar_max(data.get('pe'), 'pe'),
            affiliation=_ENTITY_TYPES[entity_type],
            img_source=_optional_str(data, 'imgSource'),
        )


@dataclass(frozen=True)
class EditBar:
    entity_id: str
    bar: str
    value_type: str
    raw_value: str


@dataclass(frozen=True)
class EditText:
    entity_id: str
    field: str
    value: str


@dataclass(frozen=True)
class ChangeStatus:
    entity_id: str
    new_state: str

    @classmethod
    def from_payload(cls, payload: Any) -> 'ChangeStatus':
        data = _require_mapping(payload)
        new_state = data.get('newState')
        if new_state not in ENTITY_STATES:
            raise InvalidInput(f"unknown entity state {new_state!r}")
        return cls(entity_id=_require_entity_id(data), new_state=new_state)


@dataclass(frozen=True)
class DeleteEntity:
    entity_id: str

    @classmethod
    def from_payload(cls, payload: Any) -> 'DeleteEntity':
        return cls(entity_id=_require_entity_id(_require_mapping(payload)))


@dataclass(frozen=True)
class ToggleTurn:
    entity_id: str

    @classmethod
    def from_payload(cls, payload: Any) -> 'ToggleTurn':
        return cls(entity_id=_require_entity_id(_require_mapping(payload)))


@dataclass(frozen=True)
class FullRest:
    entity_id: str

    @classmethod
    def from_payload(cls, payload: Any) -> 'FullRest':
        return cls(entity_id=_require_entity_id(_require_mapping(payload)))


@dataclass(frozen=True)
class Duplicate:
    entity_id: str

    @classmethod
    def from_payload(cls, payload: Any) -> 'Duplicate':
        return cls(entity_id=_require_entity_id(_require_mapping(payload)))


@dataclass(frozen=True)
class ToggleAffiliation:
    entity_id: str

    @classmethod
    def from_payload(cls, payload: Any) -> 'ToggleAffiliation':
        return cls(entity_id=_require_entity_id(_require_mapping(payload)))


@dataclass(frozen=True)
class ResetTurns:

    @classmethod
    def from_payload(cls, payload: Any = None) -> 'ResetTurns':
        return cls()


Request = Union[
    AddEntity, EditBar, EditText, ChangeStatus, DeleteEntity,
    ToggleTurn, FullRest, Duplicate, ToggleAffiliation, ResetTurns,
]


def parse_edit_request(payload: Any) -> Union[EditBar, EditText]:
    """``entity-edit`` carries both bar and text edits, told apart by ``barType``."""
    data = _require_mapping(payload)
    selector = data.get('barType')
    entity_id = _require_entity_id(data)
    if selector in BAR_SELECTORS:
        value_type = data.get('valueType')
        if value_type not in VALUE_TYPES:
            raise InvalidInput(f"valueType must be 'current' or 'max', got {value_type!r}")
        return EditBar(
            entity_id=entity_id,
            bar=selector,
            value_type=value_type,
            raw_value=_require_str(data, 'value'),
        )
    if selector in TEXT_FIELDS:
        return EditText(entity_id=entity_id, field=selector, value=_require_str(data, 'value'))
    raise InvalidInput(f"unknown field {selector!r}")


def parse_terminal_command(payload: Any) -> ResetTurns:
    data = _require_mapping(payload)
    command = data.get('command')
    if command == 'turnReset':
        return ResetTurns()
    raise InvalidInput(f"unknown command {command!r}")


def parse_bar_max(value: Any, label: str) -> int:
    """Initial bar sizes arrive as form strings ("20") or plain integers."""
    if isinstance(value, bool):
        raise InvalidInput(f"{label} must be a non-negative integer")
    if isinstance(value, str) and _BAR_MAX.fullmatch(value.strip()):
        value = int(value.strip())
    if not isinstance(value, int) or value < 0:
        raise InvalidInput(f"{label} must be a non-negative integer, got {value!r}")
    if value > MAX_BAR_VALUE:
        raise InvalidInput(f"{label} must not exceed {MAX_BAR_VALUE}")
    return value


def _require_mapping(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidInput("payload must be an object")
    return payload


def _require_entity_id(data: Dict[str, Any]) -> str:
    entity_id = data.get('entityID')
    if not isinstance(entity_id, str) or not entity_id:
        raise InvalidInput("entityID is required")
    return entity_id


def _require_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise InvalidInput(f"{key} must be a string")
    return value


def _optional_str(data: Dict[str, Any], key: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise InvalidInput(f"{key} must be a string")
    return value
