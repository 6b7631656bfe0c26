# path: lineops/crud/transaction.py
from __future__ import annotations

from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from lineops.app_logging import get_logger
from lineops.core.exceptions import ConflictError, PersistenceError


log = get_logger("crud.transaction")


@asynccontextmanager
async def transaction(session: AsyncSession, *, op: str) -> AsyncIterator[AsyncSession]:
    """
    Одна операция = одна транзакция.

    Важно:
    - несохранённые изменения в сессии (new/dirty/deleted) вне транзакции - ошибка вызывающего
      кода: не подмешиваем их в операцию и не выбрасываем молча, а отказываем (PersistenceError);
    - если сессия уже autobegin-нулась (SELECT до вызова), откатываем её с записью в лог,
      чтобы session.begin() открыл чистую транзакцию и читал свежие данные;
    - любая ошибка внутри блока -> rollback всего, что сделала операция;
    - ошибки SQLAlchemy переводим в доменные: IntegrityError/StaleDataError -> ConflictError,
      остальное -> PersistenceError. Доменные ошибки (ValidationError и т.п.) пробрасываем как есть.
    """
    if session.new or session.dirty or session.deleted:
        log.error(
            {
                "event": "tx_unsaved_changes",
                "op": op,
                "new": len(session.new),
                "dirty": len(session.dirty),
                "deleted": len(session.deleted),
            }
        )
        raise PersistenceError("Session holds unsaved changes from outside the operation", details={"op": op})

    if session.in_transaction():
        log.info({"event": "tx_reset", "op": op})
        await session.rollback()

    try:
        async with session.begin():
            yield session
    except StaleDataError as e:
        log.info({"event": "tx_stale", "op": op, "error": str(e)})
        raise ConflictError("Record was modified concurrently, reload and retry") from e
    except IntegrityError as e:
        log.info({"event": "tx_integrity", "op": op, "error": str(e.orig)})
        raise ConflictError("Operation violates a data constraint", details={"op": op}) from e
    except SQLAlchemyError as e:
        log.error({"event": "tx_failed", "op": op, "error": str(e)})
        raise PersistenceError("Transaction could not be committed", details={"op": op}) from e
