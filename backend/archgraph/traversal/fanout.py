import asyncio
from typing import Any, Awaitable, List


def _first_error(group: BaseExceptionGroup) -> BaseException:
    error = group.exceptions[0]
    while isinstance(error, BaseExceptionGroup):
        error = error.exceptions[0]
    return error


async def gather_all(*awaitables: Awaitable[Any]) -> List[Any]:
    """
    Run independent reads concurrently and return their results in order.

    The first failure cancels the remaining tasks and is re-raised as
    itself, not wrapped in an exception group. Cancelling the caller
    cancels every task. Nothing is returned unless every task succeeded.
    """
    if not awaitables:
        return []

    tasks: List[asyncio.Task] = []
    try:
        async with asyncio.TaskGroup() as tg:
            for aw in awaitables:
                tasks.append(tg.create_task(aw))
    except BaseExceptionGroup as group:
        raise _first_error(group) from None
    return [task.result() for task in tasks]
