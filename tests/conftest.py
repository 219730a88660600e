from __future__ import annotations

import logging
import os
import tempfile
from collections.abc import Generator, Iterator
from pathlib import Path

import pytest

from mosaic.datasource import InMemoryDataSource
from mosaic.meta import EntityField, EntityModel, EntityView, MetaRegistry, ViewField, ViewPanel


@pytest.fixture(autouse=True)
def configure_test_logging() -> Generator[None, None, None]:
    """Configure structlog for the test environment.

    Logs go to stderr at WARNING level so they never mix with test stdout.
    """
    from mosaic.logging import configure_logging

    configure_logging(level=logging.WARNING)
    yield


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files.

    Also saves and restores the current working directory to prevent
    tests that use os.chdir() from affecting other tests.
    """
    original_cwd = os.getcwd()
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)
    os.chdir(original_cwd)


@pytest.fixture
def clean_env() -> Generator[None, None, None]:
    """Remove all MOSAIC_ environment variables for clean testing."""
    original_env = os.environ.copy()
    for key in list(os.environ.keys()):
        if key.startswith("MOSAIC_"):
            del os.environ[key]
    yield
    os.environ.clear()
    os.environ.update(original_env)


@pytest.fixture
def sample_config_yaml() -> str:
    """Return sample mosaic.yaml content for testing."""
    return """
engine:
  tier: "service"
  base_url: "http://localhost:3000"
  endpoint: "api/ee/"
  authentication_enabled: true

logging:
  level: "debug"
"""


# =============================================================================
# Sample CRM metadata
# =============================================================================


def crm_models() -> list[EntityModel]:
    """Customer with a to-one address and to-many orders."""
    return [
        EntityModel(
            name="customer",
            title="Customer",
            fields=[
                EntityField(name="name", title="Name", type="string", is_required=True, searchable=True),
                EntityField(name="email", title="Email", type="string", is_unique=True),
                EntityField(
                    name="status",
                    title="Status",
                    type="enum",
                    searchable=True,
                    type_options={"options": ["lead", "active", "churned"]},
                ),
                EntityField(name="revenue", title="Revenue", type="number"),
                EntityField(name="vip", title="VIP", type="boolean"),
                EntityField(name="address", title="Address", type="one_to_one", ref_model="address"),
                EntityField(name="orders", title="Orders", type="one_to_many", ref_model="order"),
                EntityField(name="manager", title="Manager", type="many_to_one", ref_model="employee"),
            ],
        ),
        EntityModel(
            name="address",
            title="Address",
            fields=[
                EntityField(name="street", title="Street", type="string"),
                EntityField(name="city", title="City", type="string", is_required=True),
            ],
        ),
        EntityModel(
            name="order",
            title="Order",
            fields=[
                EntityField(name="code", title="Code", type="string", is_required=True),
                EntityField(name="amount", title="Amount", type="number"),
            ],
        ),
        EntityModel(
            name="employee",
            title="Employee",
            fields=[EntityField(name="name", title="Name", type="string", is_required=True)],
        ),
    ]


def crm_views() -> list[EntityView]:
    return [
        EntityView(
            model_name="customer",
            view_type="grid",
            title="Customers",
            items=[ViewField(name="name"), ViewField(name="status")],
        ),
        EntityView(
            model_name="customer",
            view_type="form",
            title="Customer",
            items=[
                ViewField(name="name"),
                ViewPanel(title="Details", items=[ViewField(name="status"), ViewField(name="revenue")]),
            ],
        ),
        EntityView(
            model_name="customer",
            view_type="mastail",
            title="Customer Desk",
            items=[ViewField(name="name")],
        ),
        EntityView(
            model_name="address",
            view_type="form",
            title="Address",
            items=[ViewField(name="street"), ViewField(name="city")],
        ),
        EntityView(model_name="order", view_type="grid", title="Orders", items=[ViewField(name="code")]),
        EntityView(model_name="employee", view_type="form", title="Employee", items=[ViewField(name="name")]),
    ]


@pytest.fixture
def meta_registry() -> MetaRegistry:
    """A registry holding the sample CRM models and views."""
    registry = MetaRegistry()
    for model in crm_models():
        registry.register_model(model)
    for view in crm_views():
        registry.register_view(view)
    return registry


@pytest.fixture
def data_source() -> InMemoryDataSource:
    return InMemoryDataSource()


@pytest.fixture(name="crm_models")
def crm_models_fixture() -> list[EntityModel]:
    return crm_models()


@pytest.fixture(name="crm_views")
def crm_views_fixture() -> list[EntityView]:
    return crm_views()
