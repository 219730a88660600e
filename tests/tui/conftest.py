"""TUI test fixtures and utilities.

Test Pattern:
    1. Boot an engine holding the sample CRM metadata
    2. Run a minimal app composing a ViewContainer with ``app.run_test()``
    3. Let resolution and loading workers settle, then query the DOM

Example:
    ```python
    async def test_grid(crm_engine):
        app = ContainerTestApp(crm_engine, grid_action("customer"))
        async with app.run_test() as pilot:
            await settle(pilot)
            assert pilot.app.query(EntityGrid)
    ```
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import pytest
from textual.app import App, ComposeResult

from mosaic.engine import Engine, EngineSettings, boot_engine
from mosaic.routing import Action
from mosaic.tui import ViewContainer
from tests.unit.engine.support import CrmModule, ModuleInitializer

if TYPE_CHECKING:
    from textual.pilot import Pilot


class ContainerTestApp(App[None]):
    """App composing one root ViewContainer bound to ``engine``.

    Every ``ViewContainer.Resolved`` message reaching the app is kept in
    ``resolutions`` in arrival order.
    """

    CSS_PATH = None

    def __init__(
        self,
        engine: Engine,
        initial_action: Action | None = None,
        **container_kwargs: Any,
    ) -> None:
        super().__init__()
        self.engine = engine
        self.initial_action = initial_action
        self.container_kwargs = container_kwargs
        self.resolutions: list[ViewContainer.Resolved] = []

    def compose(self) -> ComposeResult:
        yield ViewContainer(
            self.initial_action,
            resolver=self.engine.resolver(),
            id="root-container",
            **self.container_kwargs,
        )

    def on_view_container_resolved(self, message: ViewContainer.Resolved) -> None:
        self.resolutions.append(message)

    @property
    def root_container(self) -> ViewContainer:
        return self.query_one("#root-container", ViewContainer)


async def settle(pilot: Pilot[None], rounds: int = 3) -> None:
    """Wait for resolve and load workers plus the recomposes they trigger."""
    for _ in range(rounds):
        await pilot.app.workers.wait_for_complete()
        await pilot.pause()


def view_action(model_name: str, view_type: str, **extra: Any) -> Action:
    return Action(
        action_type="view",
        payload={"modelName": model_name, "viewType": view_type},
        **extra,
    )


async def build_crm_engine(*, authentication_enabled: bool = False) -> Engine:
    engine = Engine(EngineSettings(authentication_enabled=authentication_enabled))
    await boot_engine(engine, ModuleInitializer([CrmModule()]))
    data_source = engine.data_source
    await data_source.create("customer", {"name": "Acme", "status": "active"}, id="cust-1")
    await data_source.create("customer", {"name": "Globex", "status": "lead"}, id="cust-2")
    return engine


@pytest.fixture
async def crm_engine() -> Engine:
    """Presentation engine with the CRM metadata and two customers."""
    return await build_crm_engine()


pytestmark = pytest.mark.tui
