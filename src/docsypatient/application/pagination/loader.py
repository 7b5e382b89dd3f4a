"""
Paginated resource loader.

One loader backs one list screen (appointments, bills or prescriptions). It
fetches pages for the active profile, replaces the list on page 1, appends
on later pages and starts over when the active profile changes.
"""

import logging
from typing import Any, Awaitable, Callable, List, Optional

from ...core.constants import DEFAULT_PAGE_SIZE
from ...domain.entities.page import ListState, Page
from ...domain.events import ActiveProfileChanged, ProfileEventBus

logger = logging.getLogger(__name__)

PageFetcher = Callable[[int, int], Awaitable[Any]]


class PaginatedLoader:
    """Accumulates pages of one resource for one screen."""

    def __init__(
        self,
        fetch_page: PageFetcher,
        page_size: int = DEFAULT_PAGE_SIZE,
        name: str = "list",
    ):
        self._fetch_page = fetch_page
        self.page_size = page_size
        self.name = name
        self.state: ListState[Any] = ListState()
        self._generation = 0
        self._initial_loads = 0
        self._mounted = True
        self._unsubscribe: Optional[Callable[[], None]] = None

    @property
    def items(self) -> List[Any]:
        return self.state.items

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------

    async def load_page(self, page_number: int = 1) -> bool:
        """Fetch one page and merge it into the list.

        Page 1 replaces the list, any other page is appended as-is (no
        de-duplication). Fetch errors are logged and swallowed; the list
        is then left untouched. Returns True when the page was applied.
        """
        generation = self._generation
        initial = page_number == 1
        if initial:
            self._initial_loads += 1
            self.state.is_loading_initial = True

        try:
            response = await self._fetch_page(page_number, self.page_size)
        except Exception:
            logger.warning(
                f"[{self.name}] page {page_number} failed to load; keeping current list",
                exc_info=True,
            )
            return False
        finally:
            if initial and generation == self._generation:
                self._initial_loads -= 1
                self.state.is_loading_initial = self._initial_loads > 0

        if not self._mounted:
            logger.debug(f"[{self.name}] unmounted, ignoring page {page_number}")
            return False
        if generation != self._generation:
            logger.debug(f"[{self.name}] list was reset, dropping stale page {page_number}")
            return False

        self._apply(Page.from_response(response, page_number))
        return True

    def _apply(self, page: Page) -> None:
        if page.page_number == 1:
            self.state.items = list(page.items)
        else:
            self.state.items = self.state.items + list(page.items)
        self.state.current_page, self.state.total_pages = page.resolve_position(self.page_size)
        logger.debug(
            f"[{self.name}] applied page {page.page_number}: {len(page.items)} items, "
            f"now {len(self.state.items)} (page {self.state.current_page}/{self.state.total_pages})"
        )

    async def on_end_reached(self) -> bool:
        """Load the next page when the list is scrolled near its end.

        Does nothing while another next-page load is running or when the
        last known page is already loaded.
        """
        state = self.state
        if state.is_loading_more or not state.has_more:
            return False
        state.is_loading_more = True
        try:
            return await self.load_page(state.current_page + 1)
        finally:
            state.is_loading_more = False

    async def refresh(self) -> bool:
        """Pull-to-refresh: reload page 1 without cancelling other loads."""
        return await self.load_page(1)

    def reset(self) -> None:
        """Empty the list; responses to requests issued before this are dropped."""
        self._generation += 1
        self._initial_loads = 0
        self.state = ListState()

    # ------------------------------------------------------------------
    # Lifecycle and profile wiring
    # ------------------------------------------------------------------

    async def mount(self, event_bus: Optional[ProfileEventBus] = None) -> bool:
        """Start the screen: optionally follow profile changes, then load page 1."""
        self._mounted = True
        if event_bus is not None:
            self.bind(event_bus)
        return await self.load_page(1)

    def bind(self, event_bus: ProfileEventBus) -> None:
        """Follow active-profile changes published on ``event_bus``."""
        if self._unsubscribe is not None:
            self._unsubscribe()
        self._unsubscribe = event_bus.subscribe(self.on_profile_changed)

    async def on_profile_changed(self, event: Optional[ActiveProfileChanged] = None) -> None:
        """Start over under the new profile.

        Also usable directly as an ``on_changed`` callback. With no active
        profile left the list stays empty until one is selected.
        """
        if not self._mounted:
            return
        self.reset()
        if event is not None and event.current is None:
            logger.info(f"[{self.name}] active profile cleared, list emptied")
            return
        logger.info(f"[{self.name}] active profile changed, reloading")
        await self.load_page(1)

    def unmount(self) -> None:
        """Stop applying responses and release the profile subscription."""
        self._mounted = False
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None
