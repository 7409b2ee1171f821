"""
Sequence service for entity id allocation.

Ids are taken from a named counter row with an atomic
``UPDATE counters SET seq = seq + 1`` followed by a read, run in a short
transaction of its own that commits before the id is handed out. The UPDATE
holds the row lock until that commit, so concurrent allocations for the same
kind serialize. A caller that later rolls back leaves a gap; an id is never
handed out twice.
"""
import logging
from sqlalchemy import insert, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.models.counter import Counter

logger = logging.getLogger(__name__)

USERS = "users"
EXPENSES = "expenses"
APPROVAL_TASKS = "approval_tasks"

KNOWN_SEQUENCES = (USERS, EXPENSES, APPROVAL_TASKS)

counters = Counter.__table__


def ensure_counters(db: Session) -> None:
    """Create missing counter rows. Caller commits."""
    existing = set(db.execute(select(Counter.name)).scalars())
    for name in KNOWN_SEQUENCES:
        if name not in existing:
            db.add(Counter(name=name, seq=0))
    db.flush()


def _increment(conn, kind: str):
    result = conn.execute(
        update(counters)
        .where(counters.c.name == kind)
        .values(seq=counters.c.seq + 1)
    )
    if result.rowcount == 0:
        return None
    return conn.execute(select(counters.c.seq).where(counters.c.name == kind)).scalar_one()


def next_id(kind: str, db: Session) -> int:
    """
    Allocate the next id for ``kind``.

    The increment is committed on its own connection, independent of ``db``'s
    transaction.
    """
    engine = db.get_bind()
    with engine.begin() as conn:
        value = _increment(conn, kind)
    if value is not None:
        logger.debug(f"Allocated {kind} id {value}")
        return value

    # First use of an unknown kind; init_db pre-creates the known ones
    try:
        with engine.begin() as conn:
            conn.execute(insert(counters).values(name=kind, seq=1))
        logger.debug(f"Created sequence counter '{kind}'")
        return 1
    except IntegrityError:
        # Another allocator created the row first
        with engine.begin() as conn:
            return _increment(conn, kind)
