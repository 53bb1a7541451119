"""Data-fetch controller with stale-response suppression."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from pyhooks._observable import Observable
from pyhooks._scheduling import CancellationToken
from pyhooks._transport import Transport
from pyhooks.config import HooksConfig
from pyhooks.exceptions import HooksError
from pyhooks.models.fetch import FetchState, FetchTarget

_logger = logging.getLogger(__name__)


class RequestCoordinator(Observable[FetchState]):
    """Fetch a JSON resource and expose ``data``/``error``/``loading``.

    Every issue (a new target or a :meth:`refetch`) allocates the next
    generation id. When a request settles, its outcome is applied only if
    its generation is still the latest issued one; earlier requests that
    complete late are discarded without touching state.

    Usage::

        async with RequestCoordinator(transport, "https://api.example/items") as items:
            items.subscribe(render)
            ...
            await items.refetch()
    """

    def __init__(
        self,
        transport: Transport,
        target: FetchTarget | str | None = None,
        *,
        config: HooksConfig | None = None,
    ) -> None:
        super().__init__()
        self._transport = transport
        self._config = config or HooksConfig()
        self._target = FetchTarget.coerce(target) if target is not None else None
        self._generation = 0
        self._token: CancellationToken | None = None
        self._tasks: set[asyncio.Task[None]] = set()
        self._state = FetchState()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> RequestCoordinator:
        if self._target is not None and self._generation == 0:
            self.issue()
        return self

    async def __aexit__(self, *exc: Any) -> None:
        self.close()

    def close(self) -> None:
        """Tear down: invalidate the in-flight generation and abort its task."""
        if self.closed:
            return
        if self._token is not None:
            self._token.cancel()
        self._generation += 1
        for task in list(self._tasks):
            task.cancel()
        self._close_listeners()
        _logger.debug("RequestCoordinator closed at generation=%d", self._generation)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def data(self) -> Any:
        return self._state.data

    @property
    def error(self) -> Exception | None:
        return self._state.error

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def target(self) -> FetchTarget | None:
        return self._target

    @property
    def generation(self) -> int:
        """Latest issued generation id (0 before the first issue)."""
        return self._generation

    def _set_state(self, state: FetchState) -> None:
        self._state = state
        self._notify(state)

    # ------------------------------------------------------------------
    # Issuing
    # ------------------------------------------------------------------

    def issue(self, target: FetchTarget | str | None = None) -> asyncio.Task[None]:
        """Start a new generation for *target* (or the current target).

        Sets ``loading`` and clears ``error`` synchronously; ``data`` keeps
        the last settled value until this generation settles. Returns the
        task driving the request, which never raises for request failures.
        """
        if self.closed:
            raise HooksError("RequestCoordinator is closed")
        if target is not None:
            self._target = FetchTarget.coerce(target)
        if self._target is None:
            raise HooksError("No target to issue; pass a URL or FetchTarget")

        if self._token is not None:
            self._token.cancel()
        if self._config.abort_superseded:
            for task in list(self._tasks):
                task.cancel()

        self._generation += 1
        generation = self._generation
        token = CancellationToken()
        self._token = token

        _logger.debug("Issuing generation=%d %s %s", generation, self._target.method, self._target.url)
        self._set_state(self._state.model_copy(update={"loading": True, "error": None, "generation": generation}))

        task = asyncio.get_running_loop().create_task(
            self._run(generation, token, self._target),
            name=f"pyhooks-fetch-{generation}",
        )
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def retarget(self, target: FetchTarget | str) -> asyncio.Task[None] | None:
        """Issue only when *target* differs from the current one."""
        coerced = FetchTarget.coerce(target)
        if coerced == self._target and self._generation > 0:
            return None
        return self.issue(coerced)

    async def refetch(self) -> None:
        """Re-issue the current target and wait until it settles.

        Supersedes any in-flight request. Request failures land in
        :attr:`error`, they are not raised.
        """
        task = self.issue()
        await asyncio.wait({task})

    def _is_current(self, generation: int, token: CancellationToken) -> bool:
        # Compare against the live counter, not a snapshot.
        return not token.cancelled and generation == self._generation and not self.closed

    async def _run(self, generation: int, token: CancellationToken, target: FetchTarget) -> None:
        try:
            data = await self._transport.fetch_json(target)
        except Exception as exc:
            if not self._is_current(generation, token):
                _logger.debug(
                    "Discarding stale failure generation=%d latest=%d: %s",
                    generation,
                    self._generation,
                    exc,
                )
                return
            _logger.debug("Request generation=%d failed: %s", generation, exc, exc_info=True)
            self._set_state(FetchState(data=None, error=exc, loading=False, generation=generation))
            return

        if not self._is_current(generation, token):
            _logger.debug("Discarding stale response generation=%d latest=%d", generation, self._generation)
            return
        self._set_state(FetchState(data=data, error=None, loading=False, generation=generation))
