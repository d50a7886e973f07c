from typing import Callable, Optional
import random

from sqlalchemy.orm import Session

from .draw.engine import DrawEngine, PrizeDrawResult, TaskDrawResult
from .models.roster import Participant
from .names import parse_name_list
from .persistence.gateway import KeyValueGateway
from .persistence.migration import upgrade_storage
from .persistence.repository import StateRepository
from .store import actions as act
from .store.reducer import RouletteReducer
from .store.store import RouletteStore


def bootstrap_store(
    session_factory: Callable[[], Session],
    *,
    engine: Optional[DrawEngine] = None,
    reducer: Optional[RouletteReducer] = None,
) -> RouletteStore:
    """Build a store wired to durable storage.

    The workflow performs three coordinated steps:

    1. Run the one-time schema upgrade of legacy flat storage.
    2. Load the persisted project registry, teams, and active pointer.
    3. Subscribe the repository so every later change is written back.

    Parameters
    ----------
    session_factory : Callable[[], Session]
        Factory for SQLAlchemy sessions, usually from
        :func:`~drawwheel.db.engine.get_sessionmaker`.
    engine : Optional[DrawEngine]
        Optional pre-configured draw engine (e.g. with a seeded RNG).
    reducer : Optional[RouletteReducer]
        Optional reducer override.

    Returns
    -------
    RouletteStore
        Store holding the loaded state, persisting on change.
    """
    gateway = KeyValueGateway(session_factory)
    upgrade_storage(gateway)

    repository = StateRepository(gateway)
    store = RouletteStore(repository.load_state(), reducer=reducer, engine=engine)
    store.subscribe(repository.on_change)
    return store


def open_store(
    database_url: Optional[str] = None,
    *,
    rng: Optional[random.Random] = None,
    create_tables: bool = True,
) -> RouletteStore:
    """Open the configured database and return a persisted store.

    ``database_url`` defaults to ``DB_URL`` from the environment (``.env``
    is honoured). With ``create_tables`` the key-value table is created when
    missing; disable it when alembic manages the schema.
    """
    from .db.engine import create_schema, get_sessionmaker, make_engine

    db_engine = make_engine(database_url)
    if create_tables:
        create_schema(db_engine)
    return bootstrap_store(get_sessionmaker(db_engine), engine=DrawEngine(rng))


def spin_roulette(store: RouletteStore) -> Optional[Participant]:
    """Run a full participant draw: request, commit, and optional auto-removal.

    When the active project has ``auto_remove_participants`` enabled the
    winner is taken off the roster and the new history record is marked
    ``removed``.

    Returns
    -------
    Optional[Participant]
        The winner, or ``None`` when the draw was rejected.
    """
    winner = store.request_spin()
    if winner is None:
        return None
    store.finish_spin(winner)
    if store.state.auto_remove_participants:
        store.dispatch(act.RemoveFromRouletteAfterSpin(participant_id=winner.id))
    return winner


def spin_task_roulette(store: RouletteStore) -> Optional[TaskDrawResult]:
    """Run a full task draw for the next pending task.

    Returns ``None`` when no task is pending, the roster is empty, or a
    draw is already running.
    """
    result = store.request_task_spin()
    if result is None:
        return None
    if not result.participants:
        store.finish_task_spin()
        return None
    store.finish_task_spin(result.participants, result.task)
    return result


def spin_task_roulette_stepwise(store: RouletteStore) -> Optional[TaskDrawResult]:
    """Run a task draw one wheel spin per participant.

    Produces the same history record as :func:`spin_task_roulette`; the
    intermediate picks are visible to store listeners as they happen.
    """
    task = store.state.current_task()
    if task is None or not store.start_task_sequence(task):
        return None
    while store.request_task_sequence_pick() is not None:
        pass
    sequence = store.state.task_spin
    picked = sequence.selected_participants if sequence is not None else ()
    store.complete_task_sequence()
    if not picked:
        return None
    return TaskDrawResult(task=task, participants=picked)


def spin_prize_roulette(store: RouletteStore) -> Optional[PrizeDrawResult]:
    """Run a full prize draw; the drawn prize leaves the prize list."""
    result = store.request_prize_spin()
    if result is None:
        return None
    store.finish_prize_spin(result.participant, result.prize)
    return result


def import_participants(store: RouletteStore, text: str) -> int:
    """Add newline- or comma-delimited names to the active roster.

    Returns the number of participants added.
    """
    before = len(store.state.participants)
    store.dispatch(act.AddParticipantsBulk(names=parse_name_list(text)))
    return len(store.state.participants) - before


def import_tasks(store: RouletteStore, text: str) -> int:
    """Add ``name|description|requiredParticipants`` lines to the active project."""
    before = len(store.state.tasks)
    store.dispatch(act.AddTasksBulk(task_lines=text.splitlines()))
    return len(store.state.tasks) - before


def import_prizes(store: RouletteStore, text: str) -> int:
    """Add newline- or comma-delimited prize names to the active project."""
    before = len(store.state.prizes)
    store.dispatch(act.AddPrizesBulk(names=parse_name_list(text)))
    return len(store.state.prizes) - before
