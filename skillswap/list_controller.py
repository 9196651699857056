"""
Paginated, filterable list controller

One instance backs one admin screen. It owns the filters, the accumulated
pages and the request flags, and talks to the backend through
SkillSwapAPIClient. Rendering layers subscribe for change notifications.

State machine per request kind (replace / append):
    idle -> loading -> (success | error) -> idle

Usage:
    controller = ListController(HELP_SUPPORT, api)
    await controller.refresh()
    await controller.apply_filter(status="pending")
    await controller.on_scroll_near_bottom(remaining_px=40)
    await controller.mutate_item(message_id, "status", method="PATCH", body={"status": "resolved"})
"""

import asyncio
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Set, Union

from skillswap.api_client import SkillSwapAPIClient
from skillswap.config import ClientConfig
from skillswap.endpoints import EndpointSpec
from skillswap.exceptions import InvalidFilterError, NetworkError, SkillSwapError
from skillswap.filters import FilterState, build_query
from skillswap.logging_config import logger, set_endpoint


class FetchMode(str, Enum):
    REPLACE = "replace"
    APPEND = "append"


class ViewState(str, Enum):
    """What the screen should show"""
    LOADING = "loading"
    ERROR = "error"
    EMPTY = "empty"
    READY = "ready"


@dataclass
class PageState:
    items: List[Dict[str, Any]] = field(default_factory=list)
    current_page: int = 1
    total_pages: int = 1
    total: Optional[int] = None


@dataclass
class RequestState:
    loading: bool = False
    loading_more: bool = False
    error: str = ""
    mutation_error: str = ""


Listener = Callable[["ListController"], None]


def _as_int(value: Any) -> Optional[int]:
    """Numbers arrive as ints, floats or query-string echoes like "2" """
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return None
    return None


class ListController:
    """Fetches, accumulates and mutates one filtered, paginated collection"""

    def __init__(
        self,
        endpoint: EndpointSpec,
        api: SkillSwapAPIClient,
        config: Optional[ClientConfig] = None,
        filters: Optional[FilterState] = None,
    ):
        self.endpoint = endpoint
        self.api = api
        self.config = config or api.config
        self.limit = self.config.page_limit
        self.near_bottom_threshold = self.config.near_bottom_threshold

        self.filters = filters or FilterState(
            status=endpoint.default_status,
            extra=dict(endpoint.extra_params),
        )
        self.page = PageState()
        self.request = RequestState()

        self._listeners: List[Listener] = []
        self._tasks: Set[asyncio.Task] = set()
        # _generation changes on every reset; _latest_replace identifies the
        # replacing fetch whose response may still be applied.
        self._generation = 0
        self._seq = 0
        self._latest_replace = 0

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def items(self) -> List[Dict[str, Any]]:
        return self.page.items

    @property
    def current_page(self) -> int:
        return self.page.current_page

    @property
    def total_pages(self) -> int:
        return self.page.total_pages

    @property
    def loading(self) -> bool:
        return self.request.loading

    @property
    def loading_more(self) -> bool:
        return self.request.loading_more

    @property
    def error(self) -> str:
        return self.request.error

    @property
    def busy(self) -> bool:
        return self.request.loading or self.request.loading_more

    @property
    def has_more(self) -> bool:
        return self.page.current_page < self.page.total_pages

    @property
    def view_state(self) -> ViewState:
        if self.request.loading:
            return ViewState.LOADING
        if self.request.error:
            return ViewState.ERROR
        if not self.page.items:
            return ViewState.EMPTY
        return ViewState.READY

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a change listener; returns a function that removes it"""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _validated(self, partial: Dict[str, Any]) -> FilterState:
        merged = self.filters.merged(**partial)
        if "status" in partial and not self.endpoint.accepts_status(merged.status):
            allowed = ", ".join(self.endpoint.statuses)
            raise InvalidFilterError(
                f"Invalid status '{merged.status}' for {self.endpoint.name}. Allowed: {allowed}",
                field="status",
            )
        rejected = self.endpoint.rejected_extra(partial.get("extra") or {})
        if rejected is not None:
            key, value = rejected
            allowed = ", ".join(self.endpoint.extra_choices[key])
            raise InvalidFilterError(f"Invalid {key} '{value}'. Allowed: {allowed}", field=key)
        return merged

    def _reset(self) -> None:
        self._generation += 1
        self.page = PageState()
        self.request.error = ""
        self.request.loading_more = False

    def set_filter(self, **partial: Any) -> Optional[asyncio.Task]:
        """
        Merge filter changes, clear the list and schedule a replacing fetch of page 1.

        The reset happens before this returns. The fetch runs as a task on the
        current event loop; outside a running loop nothing is scheduled and the
        caller drives it with refresh().
        """
        self.filters = self._validated(partial)
        self._reset()
        logger.debug(f"{self.endpoint.name}: filters changed to {self.filters}")

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            self._notify()
            return None

        self.request.loading = True
        self._notify()
        task = loop.create_task(self.fetch_page(1, FetchMode.REPLACE))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def apply_filter(self, **partial: Any) -> None:
        """Same as set_filter, but awaits the replacing fetch"""
        self.filters = self._validated(partial)
        self._reset()
        await self.fetch_page(1, FetchMode.REPLACE)

    async def refresh(self) -> None:
        """Clear and reload page 1 with the current filters"""
        self._reset()
        await self.fetch_page(1, FetchMode.REPLACE)

    async def wait_idle(self) -> None:
        """Wait for fetches scheduled by set_filter"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    async def fetch_page(self, page: int, mode: Union[FetchMode, str] = FetchMode.REPLACE) -> None:
        """
        Fetch one page and merge it into the list.

        Replace mode swaps the items wholesale, append mode concatenates.
        Failures set `error` and leave `items` untouched. A response that was
        overtaken by a later reset or a later replacing fetch is dropped.
        """
        if page < 1:
            raise ValueError(f"page must be >= 1, got {page}")
        mode = FetchMode(mode)

        self._seq += 1
        seq = self._seq
        generation = self._generation
        if mode == FetchMode.REPLACE:
            self._latest_replace = seq
            self.request.loading = True
        else:
            self.request.loading_more = True
        self.request.error = ""
        self._notify()

        params = build_query(
            self.filters,
            page,
            self.limit,
            all_status=self.endpoint.all_status,
            date_style=self.endpoint.date_style,
        )
        set_endpoint(self.endpoint.path)

        def is_current() -> bool:
            if mode == FetchMode.REPLACE:
                return seq == self._latest_replace and generation == self._generation
            return generation == self._generation

        try:
            data = await self.api.get_json(
                self.endpoint.path, params=params, fallback=self.endpoint.fetch_error
            )
            if not is_current():
                logger.debug(f"{self.endpoint.name}: dropping stale page {page} response")
                return
            self._apply_page(data, page, mode)
        except SkillSwapError as e:
            if not is_current():
                return
            self.request.error = self.endpoint.fetch_error if isinstance(e, NetworkError) else e.message
            logger.log_error_with_context(e, context=f"{self.endpoint.name} page {page}")
        finally:
            if is_current():
                if mode == FetchMode.REPLACE:
                    self.request.loading = False
                else:
                    self.request.loading_more = False
                self._notify()

    def _apply_page(self, data: Any, requested_page: int, mode: FetchMode) -> None:
        items = self.endpoint.items_from(data)
        body = data if isinstance(data, dict) else {}

        current_page = _as_int(body.get("currentPage"))
        total_pages = _as_int(body.get("totalPages"))
        current_page = current_page if current_page is not None and current_page >= 1 else requested_page
        total_pages = total_pages if total_pages is not None and total_pages >= 1 else 1

        if mode == FetchMode.REPLACE:
            self.page.items = items
        else:
            self.page.items = self.page.items + items
        self.page.current_page = current_page
        self.page.total_pages = max(total_pages, current_page)
        self.page.total = _as_int(body.get("total"))

        logger.debug(
            f"{self.endpoint.name}: page {current_page}/{self.page.total_pages}, "
            f"{len(items)} new, {len(self.page.items)} loaded"
        )

    async def on_scroll_near_bottom(self, remaining_px: float = 0) -> bool:
        """Load the next page when the viewport is within the threshold of the end; returns whether it fetched"""
        if remaining_px > self.near_bottom_threshold:
            return False
        if self.busy or not self.has_more:
            return False
        await self.fetch_page(self.page.current_page + 1, FetchMode.APPEND)
        return True

    async def load_all(self, max_pages: Optional[int] = None) -> None:
        """Keep appending until the last page (or max_pages) is loaded"""
        while self.has_more and not self.request.error:
            if max_pages is not None and self.page.current_page >= max_pages:
                break
            if not await self.on_scroll_near_bottom():
                break

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    async def mutate_item(
        self,
        item_id: str,
        action: Optional[str] = None,
        method: str = "POST",
        body: Optional[Dict[str, Any]] = None,
        fallback: Optional[str] = None,
    ) -> Any:
        """
        Send METHOD {path}/{id}/{action}, then reload page 1 from scratch.

        The list is never patched in place. On failure the error is recorded
        in `mutation_error`, the list is left as it was, and the exception is
        re-raised for the caller to surface.
        """
        path = self.endpoint.item_path(item_id, action)
        set_endpoint(path)
        self.request.mutation_error = ""
        try:
            result = await self.api.send(
                method, path, data=body, fallback=fallback or self.endpoint.mutate_error
            )
        except SkillSwapError as e:
            if isinstance(e, NetworkError):
                self.request.mutation_error = fallback or self.endpoint.mutate_error
            else:
                self.request.mutation_error = e.message
            logger.log_error_with_context(e, context=f"{method} {path}")
            self._notify()
            raise

        logger.info(f"{method} {path} succeeded, reloading {self.endpoint.name}")
        await self.refresh()
        return result
