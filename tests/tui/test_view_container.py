"""Pilot tests for ViewContainer resolution and rendering."""

from __future__ import annotations

from textual.widgets import DataTable, Input, Static

from mosaic.components import ComponentRegistry, NamedRenderer
from mosaic.components.builtin import EntityForm, EntityGrid, EntityMasterTail, ObjectSelected
from mosaic.constants import VIEW_INSPECTOR_SLOT
from mosaic.engine import Engine, boot_engine
from mosaic.modules.builtin import AuthForm
from mosaic.routing import Action, ContextObject
from mosaic.routing.types import DefaultResolution, Diagnostic, HiddenResolution, ViewResolution
from mosaic.session import UserInfo
from mosaic.tui import ViewContainer
from tests.tui.conftest import ContainerTestApp, build_crm_engine, settle, view_action
from tests.unit.engine.support import CrmModule, ModuleInitializer


class TestInitialAction:
    async def test_renders_grid_with_objects(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "grid"))
        async with app.run_test() as pilot:
            await settle(pilot)

            grid = app.query_one(EntityGrid)
            assert grid.props.model.name == "customer"
            assert grid.query_one(DataTable).row_count == 2
            assert isinstance(app.resolutions[-1].resolution, ViewResolution)

    async def test_initial_action_is_accepted_at_root(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "grid", target="elsewhere"))
        async with app.run_test() as pilot:
            await settle(pilot)

            scope = app.root_container.scope
            assert scope.is_root
            assert scope.current_action is not None
            assert scope.current_action.target == "__self__"

    async def test_missing_view_renders_diagnostic(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "kanban"))
        async with app.run_test() as pilot:
            await settle(pilot)

            assert len(app.root_container.query(".diagnostic")) == 1
            resolution = app.resolutions[-1].resolution
            assert isinstance(resolution, Diagnostic)
            assert "viewType: kanban" in resolution.message

    async def test_default_content_without_action(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, default="Pick a customer")
        async with app.run_test() as pilot:
            await settle(pilot)

            assert len(app.root_container.query(".default")) == 1
            assert isinstance(app.resolutions[-1].resolution, DefaultResolution)

    async def test_hidden_action_renders_nothing(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, Action(action_type="hidden"))
        async with app.run_test() as pilot:
            await settle(pilot)

            assert len(app.root_container.children) == 0
            assert isinstance(app.resolutions[-1].resolution, HiddenResolution)


class TestPerformAction:
    async def test_switches_to_form_for_context_object(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "grid"))
        async with app.run_test() as pilot:
            await settle(pilot)

            app.root_container.perform_action(
                view_action("customer", "form", context_object=ContextObject(id="cust-1"))
            )
            await settle(pilot)

            assert not app.query(EntityGrid)
            form = app.query_one(EntityForm)
            assert form.props.base_object_id == "cust-1"
            assert form.values is not None
            assert form.values["name"] == "Acme"

    async def test_broadcast_reloads_collections(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "grid"))
        async with app.run_test() as pilot:
            await settle(pilot)

            obj = await crm_engine.data_source.create("customer", {"name": "Initech"})
            app.root_container.scope.broadcast("created", obj)
            await settle(pilot)

            assert app.query_one(EntityGrid).query_one(DataTable).row_count == 3
            assert app.root_container.scope.broadcast_data is not None


class TestNestedContainers:
    async def test_master_detail_routes_selection_to_tail(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "mastail"))
        async with app.run_test() as pilot:
            await settle(pilot)

            mastail = app.query_one(EntityMasterTail)
            tail = mastail.query_one(ViewContainer)
            assert tail.scope.parent is app.root_container.scope
            assert tail.scope.name in app.root_container.scope.children

            mastail.query_one(EntityGrid).post_message(ObjectSelected("customer", "cust-2"))
            await settle(pilot)

            form = tail.query_one(EntityForm)
            assert form.props.base_object_id == "cust-2"
            assert app.root_container.scope.current_action.payload["viewType"] == "mastail"

    async def test_nested_container_gets_named_child_scope(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, default=lambda: ViewContainer(name="detail", id="inner"))
        async with app.run_test() as pilot:
            await settle(pilot)

            inner = app.query_one("#inner", ViewContainer)
            assert inner.scope.name == "detail"
            assert inner.scope.parent is app.root_container.scope
            assert inner.resolver is app.root_container.resolver

    async def test_shared_scope(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(
            crm_engine, default=lambda: ViewContainer(share_scope=True, id="inner")
        )
        async with app.run_test() as pilot:
            await settle(pilot)

            inner = app.query_one("#inner", ViewContainer)
            assert inner.scope is app.root_container.scope
            assert app.root_container.scope.children == {}

    async def test_shared_scope_master_detail_routes_into_parent(
        self, crm_engine: Engine
    ) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "mastail"), share_scope=True)
        async with app.run_test() as pilot:
            await settle(pilot)

            root_scope = app.root_container.scope
            mastail = app.query_one(EntityMasterTail)
            assert mastail.props.opens_scope is False
            tail = mastail.query_one(ViewContainer)
            assert tail.scope is root_scope
            assert root_scope.children == {}

            mastail.query_one(EntityGrid).post_message(ObjectSelected("customer", "cust-2"))
            await settle(pilot)

            assert root_scope.current_action.payload["viewType"] == "form"
            assert root_scope.current_action.context_object.id == "cust-2"
            assert not app.query(EntityMasterTail)
            assert app.query_one(EntityForm).props.base_object_id == "cust-2"

    async def test_replaced_tail_releases_its_scope(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "mastail"))
        async with app.run_test() as pilot:
            await settle(pilot)
            assert len(app.root_container.scope.children) == 1

            app.root_container.perform_action(view_action("customer", "grid"))
            await settle(pilot)

            assert app.root_container.scope.children == {}


class TestComponents:
    async def test_named_component_and_slot(self) -> None:
        registry = ComponentRegistry()
        registry.register_renderer(NamedRenderer("banner", lambda: Static("Banner", id="banner")))
        registry.register_renderer(
            NamedRenderer(
                "inspector",
                lambda: Static("Inspector", classes="inspector"),
                slot_name=VIEW_INSPECTOR_SLOT,
            )
        )
        engine = Engine(component_registry=registry)
        await boot_engine(engine, ModuleInitializer([CrmModule()]))

        app = ContainerTestApp(engine, Action(action_type="comp", payload={"comp": "banner"}))
        async with app.run_test() as pilot:
            await settle(pilot)

            assert len(app.query("#banner")) == 1
            assert len(app.root_container.query(".inspector")) == 1


class TestAuthentication:
    async def test_sign_in_view_until_authenticated(self) -> None:
        engine = await build_crm_engine(authentication_enabled=True)
        app = ContainerTestApp(engine, view_action("customer", "grid"))
        async with app.run_test() as pilot:
            await settle(pilot)

            form = app.query_one(AuthForm)
            assert not app.query(EntityGrid)
            assert form.props.opens_scope is False

            form.post_message(
                AuthForm.Authenticated(UserInfo(id="u-1", email="demo@demo.com", name="Demo"))
            )
            await settle(pilot)

            assert not app.query(AuthForm)
            assert len(app.query(EntityGrid)) == 1
            session = await engine.session_manager.get_session()
            assert session.session_id == "u-1"


class TestViewData:
    """Built-in views read through data source subscriptions."""

    async def test_grid_pages_keep_previous_rows(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(
            crm_engine, view_action("customer", "grid"), view_options={"pageSize": 1}
        )
        async with app.run_test() as pilot:
            await settle(pilot)

            grid = app.query_one(EntityGrid)
            assert grid.subscription is not None
            first = grid.objects[0].id

            grid.show_page(2)

            state = grid.subscription.state
            assert state.is_previous_data is True
            assert state.data[0].id == first

            await settle(pilot)
            assert grid.subscription.state.is_previous_data is False
            assert grid.query_one(DataTable).row_count == 1
            assert grid.objects[0].id != first

    async def test_replaced_view_closes_subscription(self, crm_engine: Engine) -> None:
        app = ContainerTestApp(crm_engine, view_action("customer", "grid"))
        async with app.run_test() as pilot:
            await settle(pilot)
            subscription = app.query_one(EntityGrid).subscription

            app.root_container.perform_action(Action(action_type="hidden"))
            await settle(pilot)

            assert subscription is not None
            assert subscription.closed

    async def test_created_object_is_edited_afterwards(self, crm_engine: Engine) -> None:
        action = Action(
            action_type="view",
            payload={"modelName": "employee", "viewType": "form", "mode": "create"},
        )
        app = ContainerTestApp(crm_engine, action)
        async with app.run_test() as pilot:
            await settle(pilot)

            form = app.query_one(EntityForm)
            assert form.creating
            before = await crm_engine.data_source.find_count("employee")
            name_input = next(w for w in form.query(Input) if w.name == "name")
            name_input.value = "Grace"

            created = await form.save()
            await settle(pilot)

            assert created is not None
            assert not form.creating
            assert form.props.base_object_id == created.id
            assert form.values is not None
            assert form.values["name"] == "Grace"

            await form.save()

            assert await crm_engine.data_source.find_count("employee") == before + 1
