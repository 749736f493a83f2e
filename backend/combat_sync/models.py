from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

STATUS_ALIVE = 'alive'
STATUS_UNCONSCIOUS = 'unconscious'
STATUS_DEAD = 'dead'
STATUSES = (STATUS_ALIVE, STATUS_UNCONSCIOUS, STATUS_DEAD)

MAX_BAR_VALUE = 999999

ALLIES = 'allies'
FOES = 'foes'
AFFILIATIONS = (ALLIES, FOES)


@dataclass
class Bar:
    current_value: int
    max_value: int

    @classmethod
    def full(cls, value: int) -> 'Bar':
        return cls(current_value=value, max_value=value)

    def to_dict(self) -> Dict[str, int]:
        return {
            'currentValue': self.current_value,
            'maxValue': self.max_value,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Bar':
        current_value = _require_int(data['currentValue'])
        max_value = _require_int(data['maxValue'])
        if not 0 <= current_value <= max_value <= MAX_BAR_VALUE:
            raise ValueError(f"bar out of range: {current_value}/{max_value}")
        return cls(current_value=current_value, max_value=max_value)


@dataclass
class Entity:
    id: str
    name: str
    health: Bar
    magic: Bar
    equipment: Bar
    conditions: str = ''
    img_source: str = ''
    status: str = STATUS_ALIVE
    stats_visible: bool = False
    turn_done: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'conditions': self.conditions,
            'healthPoints': self.health.to_dict(),
            'magicPoints': self.magic.to_dict(),
            'equipmentPoints': self.equipment.to_dict(),
            'imgSource': self.img_source,
            'status': self.status,
            'statsVisibleByPlayers': self.stats_visible,
            'turnDone': self.turn_done,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Entity':
        status = data.get('status', STATUS_ALIVE)
        if status not in STATUSES:
            raise ValueError(f"unknown status {status!r}")
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            health=Bar.from_dict(data['healthPoints']),
            magic=Bar.from_dict(data['magicPoints']),
            equipment=Bar.from_dict(data['equipmentPoints']),
            conditions=str(data.get('conditions', '')),
            img_source=str(data.get('imgSource', '')),
            status=status,
            stats_visible=bool(data.get('statsVisibleByPlayers', False)),
            # Older snapshots omit the flag entirely
            turn_done=bool(data.get('turnDone', False)),
        )


@dataclass
class GameState:
    """The roster every observer sees: allies and foes in display order.

    ``clocks`` belongs to the persisted shape but no operation touches it,
    so it is carried through verbatim.
    """

    allies: List[Entity] = field(default_factory=list)
    foes: List[Entity] = field(default_factory=list)
    clocks: List[Any] = field(default_factory=list)

    def roster(self, affiliation: str) -> List[Entity]:
        if affiliation == ALLIES:
            return self.allies
        if affiliation == FOES:
            return self.foes
        raise ValueError(f"unknown affiliation {affiliation!r}")

    def affiliation_of(self, entity_id: str) -> Optional[str]:
        for affiliation in AFFILIATIONS:
            if any(entity.id == entity_id for entity in self.roster(affiliation)):
                return affiliation
        return None

    def find(self, entity_id: str) -> Optional[Entity]:
        for entity in self.all_entities():
            if entity.id == entity_id:
                return entity
        return None

    def all_entities(self) -> List[Entity]:
        return self.allies + self.foes

    def to_dict(self) -> Dict[str, Any]:
        return {
            'allies': [entity.to_dict() for entity in self.allies],
            'foes': [entity.to_dict() for entity in self.foes],
            'clocks': list(self.clocks),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameState':
        if not isinstance(data, dict):
            raise ValueError("state must be a JSON object")
        state = cls(
            allies=[Entity.from_dict(item) for item in data.get('allies', [])],
            foes=[Entity.from_dict(item) for item in data.get('foes', [])],
            clocks=list(data.get('clocks', [])),
        )
        ids = [entity.id for entity in state.all_entities()]
        if len(ids) != len(set(ids)):
            raise ValueError("duplicate entity ids in state")
        return state


def _require_int(value: Any) -> int:
    # bool is an int subclass; a flag in a bar slot means the file is damaged
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"expected an integer, got {value!r}")
    return value
