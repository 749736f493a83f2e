"""Roster mutations.

Every operation takes the current GameState and a parsed request and
returns a brand new GameState; the input is never modified, so it can sit
in the undo history as-is.
"""

import copy
import dataclasses
import uuid
from typing import Callable, Dict, Tuple

from combat_sync.errors import InvalidInput, NotFound
from combat_sync.models import (
    ALLIES, FOES, STATUS_ALIVE, STATUS_DEAD, STATUS_UNCONSCIOUS,
    Bar, Entity, GameState,
)
from combat_sync.requests import (
    VISIBLE_STATS,
    AddEntity, ChangeStatus, DeleteEntity, Duplicate, EditBar, EditText,
    FullRest, Request, ResetTurns, ToggleAffiliation, ToggleTurn,
)
from .bars import compute_new_bar

BAR_ATTRIBUTES = {
    'HP': 'health',
    'MP': 'magic',
    'PE': 'equipment',
}
TEXT_ATTRIBUTES = {
    'name': 'name',
    'conditions': 'conditions',
    'imgSource': 'img_source',
}


def new_entity_id() -> str:
    return str(uuid.uuid1())


def _copy_with_entity(state: GameState, entity_id: str) -> Tuple[GameState, Entity]:
    new_state = copy.deepcopy(state)
    entity = new_state.find(entity_id)
    if entity is None:
        raise NotFound(f"no entity with id {entity_id!r}")
    return new_state, entity


def add_entity(state: GameState, request: AddEntity) -> GameState:
    new_state = copy.deepcopy(state)
    entity = Entity(
        id=new_entity_id(),
        name=request.name,
        health=Bar.full(request.hp_max),
        magic=Bar.full(request.mp_max),
        equipment=Bar.full(request.pe_max),
        img_source=request.img_source,
    )
    new_state.roster(request.affiliation).append(entity)
    return new_state


def edit_bar(state: GameState, request: EditBar) -> GameState:
    attribute = BAR_ATTRIBUTES.get(request.bar)
    if attribute is None:
        raise InvalidInput(f"unknown bar {request.bar!r}")
    new_state, entity = _copy_with_entity(state, request.entity_id)
    new_bar = compute_new_bar(getattr(entity, attribute), request.value_type, request.raw_value)
    setattr(entity, attribute, new_bar)
    return new_state


def edit_text(state: GameState, request: EditText) -> GameState:
    attribute = TEXT_ATTRIBUTES.get(request.field)
    if attribute is None:
        raise InvalidInput(f"unknown field {request.field!r}")
    new_state, entity = _copy_with_entity(state, request.entity_id)
    setattr(entity, attribute, request.value)
    return new_state


def change_status(state: GameState, request: ChangeStatus) -> GameState:
    """Write a status, or flip stat visibility for ``visible-stats``.

    Going down (dead or unconscious) also empties the health bar.
    """
    new_state, entity = _copy_with_entity(state, request.entity_id)
    if request.new_state == VISIBLE_STATS:
        entity.stats_visible = not entity.stats_visible
    else:
        entity.status = request.new_state
    if request.new_state in (STATUS_DEAD, STATUS_UNCONSCIOUS):
        entity.health = Bar(current_value=0, max_value=entity.health.max_value)
    return new_state


def delete_entity(state: GameState, request: DeleteEntity) -> GameState:
    affiliation = state.affiliation_of(request.entity_id)
    if affiliation is None:
        raise NotFound(f"no entity with id {request.entity_id!r}")
    new_state = copy.deepcopy(state)
    roster = new_state.roster(affiliation)
    roster[:] = [entity for entity in roster if entity.id != request.entity_id]
    return new_state


def toggle_turn(state: GameState, request: ToggleTurn) -> GameState:
    new_state, entity = _copy_with_entity(state, request.entity_id)
    entity.turn_done = not entity.turn_done
    return new_state


def full_rest(state: GameState, request: FullRest) -> GameState:
    new_state, entity = _copy_with_entity(state, request.entity_id)
    entity.health = Bar.full(entity.health.max_value)
    entity.magic = Bar.full(entity.magic.max_value)
    entity.status = STATUS_ALIVE
    return new_state


def duplicate_entity(state: GameState, request: Duplicate) -> GameState:
    """Spawn a fresh copy of an entity at full bars.

    Duplicates always join the foes, whatever side the source is on.
    """
    source = state.find(request.entity_id)
    if source is None:
        raise NotFound(f"no entity with id {request.entity_id!r}")
    return add_entity(state, AddEntity(
        name=source.name,
        hp_max=source.health.max_value,
        mp_max=source.magic.max_value,
        pe_max=source.equipment.max_value,
        affiliation=FOES,
        img_source=source.img_source,
    ))


def toggle_affiliation(state: GameState, request: ToggleAffiliation) -> GameState:
    affiliation = state.affiliation_of(request.entity_id)
    if affiliation is None:
        raise NotFound(f"no entity with id {request.entity_id!r}")
    new_state = copy.deepcopy(state)
    roster = new_state.roster(affiliation)
    moved = next(entity for entity in roster if entity.id == request.entity_id)
    roster.remove(moved)
    # Same id on the other side, appended at the end
    other = FOES if affiliation == ALLIES else ALLIES
    new_state.roster(other).append(dataclasses.replace(moved))
    return new_state


def reset_turns(state: GameState, request: ResetTurns) -> GameState:
    new_state = copy.deepcopy(state)
    for entity in new_state.all_entities():
        entity.turn_done = False
    return new_state


_OPERATIONS: Dict[type, Callable[[GameState, Request], GameState]] = {
    AddEntity: add_entity,
    EditBar: edit_bar,
    EditText: edit_text,
    ChangeStatus: change_status,
    DeleteEntity: delete_entity,
    ToggleTurn: toggle_turn,
    FullRest: full_rest,
    Duplicate: duplicate_entity,
    ToggleAffiliation: toggle_affiliation,
    ResetTurns: reset_turns,
}


def apply_request(state: GameState, request: Request) -> GameState:
    operation = _OPERATIONS.get(type(request))
    if operation is None:
        raise InvalidInput(f"unsupported request {type(request).__name__}")
    return operation(state, request)
