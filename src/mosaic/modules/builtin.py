"""The module every engine registers first.

Provides the default and configuration models, the user model with a demo
account, the ``auth`` and ``splash`` views and a greeting servlet.
"""

from __future__ import annotations

import hashlib
from typing import Any

from textual.app import ComposeResult
from textual.message import Message
from textual.widget import Widget
from textual.widgets import Button, Input, Label, Static

from mosaic.components.builtin import BuiltinView
from mosaic.components.types import ComponentInfo, ViewProps
from mosaic.constants import (
    AUTH_VIEW_TYPE,
    CONFIG_MODEL_NAME,
    DEFAULT_MODEL_NAME,
    SPLASH_VIEW_TYPE,
)
from mosaic.datasource.query import EntityQuery, LeafCondition
from mosaic.logging import get_logger
from mosaic.meta.types import EntityField, EntityModel, EntityView, ViewField
from mosaic.modules.types import (
    ComponentContributions,
    ConfigContributions,
    DataContributions,
    ImportEntity,
    Module,
    ModuleInfo,
)
from mosaic.servlets.types import HttpResponse, ServletRequest, ServletResponse
from mosaic.session.types import UserInfo

__all__ = [
    "BUILTIN_MODELS",
    "BUILTIN_VIEWS",
    "DEMO_USER_ID",
    "USER_MODEL_NAME",
    "AuthForm",
    "BuiltinModule",
    "GreetingServlet",
    "hash_password",
]

logger = get_logger(__name__)

USER_MODEL_NAME = "ee-base-user"
CHANGE_LOG_MODEL_NAME = "entity-change-log"
DEMO_USER_ID = "3706a32d89d04423bc84cc1f9366881d"


def hash_password(password: str) -> str:
    """Digest stored in the user model's ``password`` field."""
    return hashlib.md5(password.encode("utf-8")).hexdigest()


BUILTIN_MODELS: tuple[EntityModel, ...] = (
    EntityModel(name=DEFAULT_MODEL_NAME, title="Default Model"),
    EntityModel(
        name=CONFIG_MODEL_NAME,
        title="Config Model",
        fields=[
            EntityField(name="name", title="Name", type="string", is_required=True, searchable=True),
            EntityField(name="version", title="Version", type="number", is_required=True),
            EntityField(name="content", title="Content", type="string", is_required=True),
        ],
    ),
    EntityModel(
        name=CHANGE_LOG_MODEL_NAME,
        title="Entity Change Log",
        fields=[
            EntityField(name="modelName", title="Model Name", type="string", is_required=True, searchable=True),
            EntityField(name="objectId", title="Object ID", type="string", is_required=True, searchable=True),
            EntityField(name="changedBy", title="Changed By", type="string", is_required=True, searchable=True),
            EntityField(name="changeType", title="Change Type", type="string", is_required=True, searchable=True),
            EntityField(name="changeDetails", title="Change Details", type="json"),
        ],
    ),
    EntityModel(
        name=USER_MODEL_NAME,
        title="User",
        fields=[
            EntityField(name="userName", title="User Name", type="string", is_required=True, searchable=True),
            EntityField(name="email", title="Email", type="string", is_required=True, searchable=True, is_unique=True),
            EntityField(name="password", title="Password", type="string", is_required=True),
            EntityField(name="avatar", title="Avatar", type="binary"),
            EntityField(name="role", title="Roles", type="array", type_options={"options": ["admin", "user"]}),
        ],
    ),
)

BUILTIN_VIEWS: tuple[EntityView, ...] = (
    EntityView(model_name=DEFAULT_MODEL_NAME, view_type=AUTH_VIEW_TYPE, title="Sign in"),
    EntityView(model_name=DEFAULT_MODEL_NAME, view_type=SPLASH_VIEW_TYPE, title="Welcome"),
    EntityView(
        model_name=CHANGE_LOG_MODEL_NAME,
        view_type="grid",
        title="Entity Change Log",
        items=[
            ViewField(name="modelName"),
            ViewField(name="objectId"),
            ViewField(name="changedBy"),
            ViewField(name="changeType"),
            ViewField(name="changeDetails"),
        ],
    ),
    EntityView(
        model_name=USER_MODEL_NAME,
        view_type="grid",
        title="Users",
        items=[ViewField(name="userName"), ViewField(name="email")],
    ),
    EntityView(
        model_name=USER_MODEL_NAME,
        view_type="form",
        title="User",
        items=[
            ViewField(name="userName"),
            ViewField(name="email"),
            ViewField(name="password", widget="password"),
            ViewField(name="avatar"),
        ],
    ),
)


class GreetingServlet:
    """Answers ``GET``/``POST`` on ``/hello`` with the engine endpoint."""

    path = "/hello"
    methods = ("GET", "POST")

    async def handle(self, request: ServletRequest, response: ServletResponse) -> None:
        response.write(
            HttpResponse(body=f"Hello from the built-in module! {request.engine.settings.endpoint}")
        )


# =============================================================================
# Views
# =============================================================================


class AuthForm(Widget):
    """Email and password sign-in checked against the user model."""

    DEFAULT_CSS = """
    AuthForm {
        height: auto;
        width: 60;
        padding: 1 2;
        border: round $primary;
    }

    AuthForm .auth-error {
        color: $error;
    }
    """

    class Authenticated(Message):
        """Posted when the credentials matched a user."""

        def __init__(self, user_info: UserInfo) -> None:
            self.user_info = user_info
            super().__init__()

    def __init__(self, props: ViewProps, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self.props = props

    def compose(self) -> ComposeResult:
        yield Label(self.props.view.title, classes="auth-title")
        yield Input(placeholder="Email", id="auth-email")
        yield Input(placeholder="Password", password=True, id="auth-password")
        yield Static("", classes="auth-error")
        yield Button("Sign in", id="auth-submit", variant="primary")

    async def authenticate(self, email: str, password: str) -> UserInfo | None:
        """Find the user with ``email`` whose password digest matches."""
        if self.props.data_source is None:
            return None
        result = await self.props.data_source.find_many(
            USER_MODEL_NAME,
            EntityQuery(page_size=1, filter=LeafCondition(field="email", value=email)),
        )
        user = result.data[0] if result.data else None
        if user is None or user.values.get("password") != hash_password(password):
            logger.info("authentication_rejected", email=email)
            return None
        return UserInfo(
            id=user.id,
            email=user.values.get("email") or "",
            name=user.values.get("userName") or "",
            roles=list(user.values.get("role") or []),
        )

    async def on_button_pressed(self, event: Button.Pressed) -> None:
        if event.button.id != "auth-submit":
            return
        event.stop()
        email = self.query_one("#auth-email", Input).value.strip()
        password = self.query_one("#auth-password", Input).value
        user_info = await self.authenticate(email, password)
        if user_info is None:
            self.query_one(".auth-error", Static).update("Invalid email or password")
            return
        self.post_message(self.Authenticated(user_info))


class SplashScreen(Static):
    def __init__(self, props: ViewProps, **kwargs: Any) -> None:
        super().__init__(props.view.title, **kwargs)


class BuiltinModule(Module):
    info = ModuleInfo(
        name="build-in",
        version="0.0.1",
        provider="mosaic",
        description="Default models, sign-in view and greeting servlet",
    )

    async def setup_config(self, config: ConfigContributions) -> None:
        config.models.extend(BUILTIN_MODELS)
        config.views.extend(BUILTIN_VIEWS)
        config.servlets.append(GreetingServlet())

    async def setup_components(self, components: ComponentContributions) -> None:
        components.views.append(BuiltinView(ComponentInfo(AUTH_VIEW_TYPE, "Sign in"), AuthForm))
        components.views.append(BuiltinView(ComponentInfo(SPLASH_VIEW_TYPE, "Splash"), SplashScreen))

    async def setup_data(self, data: DataContributions) -> None:
        data.entities.append(
            ImportEntity(
                id=DEMO_USER_ID,
                model_name=USER_MODEL_NAME,
                values={
                    "userName": "Demo User",
                    "email": "demo@demo.com",
                    "password": "fe01ce2a7fbac8fafaed7c982a04e229",
                    "role": [],
                },
            )
        )
