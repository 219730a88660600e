"""Modules and initializers shared by engine tests."""

from __future__ import annotations

from dataclasses import dataclass, field

from mosaic.engine import Engine
from mosaic.meta import EntityModel, EntityView
from mosaic.modules import ConfigContributions, DataContributions, ImportEntity, Module, ModuleInfo
from tests.conftest import crm_models, crm_views


@dataclass
class ModuleInitializer:
    """Initializer registering a fixed list of modules."""

    modules: list[Module] = field(default_factory=list)
    calls: int = 0

    async def init(self, engine: Engine) -> None:
        self.calls += 1
        for module in self.modules:
            engine.module_registry.register_module(module)


class CrmModule(Module):
    info = ModuleInfo(name="crm", version="1.0.0")

    async def setup_config(self, config: ConfigContributions) -> None:
        config.models.extend(crm_models())
        config.views.extend(crm_views())

    async def setup_data(self, data: DataContributions) -> None:
        data.entities.append(
            ImportEntity(id="emp-1", model_name="employee", values={"name": "Grace"})
        )
        data.entities.append(
            ImportEntity.model_validate(
                {
                    "id": "cust-1",
                    "modelName": "customer",
                    "values": {"name": "Acme"},
                    "references": [{"fromFieldName": "manager", "toObjectId": "emp-1"}],
                }
            )
        )


def make_module(
    name: str,
    models: list[EntityModel] | None = None,
    views: list[EntityView] | None = None,
) -> Module:
    """Build a module contributing ``models`` and ``views``."""

    class _Module(Module):
        info = ModuleInfo(name=name)

        async def setup_config(self, config: ConfigContributions) -> None:
            config.models.extend(models or [])
            config.views.extend(views or [])

    return _Module()
