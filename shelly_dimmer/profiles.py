"""Device profile registry for supported Shelly dimmers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType


class DeviceModel(str, Enum):
    """Shelly dimmer models selectable in the instance configuration."""

    DALI_DIMMER_GEN3 = "shelly-dali-dimmer-gen3"
    DIMMER_2 = "shelly-dimmer-2"
    PLUS_DIMMER_1PM = "shelly-plus-dimmer-1pm"
    PLUS_DIMMER_10V = "shelly-plus-dimmer-10v"


@dataclass(frozen=True, slots=True)
class DeviceProfile:
    """Addressing parameters for one dimmer model."""

    model: DeviceModel
    label: str
    light_id: int
    rpc_path: str

    @property
    def model_id(self) -> str:
        """Return the configuration identifier of the model."""

        return self.model.value


DEFAULT_MODEL = DeviceModel.DALI_DIMMER_GEN3

# New models only need an enum member and a row here.
DEVICE_PROFILES: MappingProxyType[DeviceModel, DeviceProfile] = MappingProxyType(
    {
        DeviceModel.DALI_DIMMER_GEN3: DeviceProfile(
            model=DeviceModel.DALI_DIMMER_GEN3,
            label="Shelly DALI Dimmer Gen3",
            light_id=0,
            rpc_path="/rpc",
        ),
        DeviceModel.DIMMER_2: DeviceProfile(
            model=DeviceModel.DIMMER_2,
            label="Shelly Dimmer 2 (Gen1/Gen2)",
            light_id=0,
            rpc_path="/rpc",
        ),
        DeviceModel.PLUS_DIMMER_1PM: DeviceProfile(
            model=DeviceModel.PLUS_DIMMER_1PM,
            label="Shelly Plus Dimmer 1PM (Gen3)",
            light_id=0,
            rpc_path="/rpc",
        ),
        DeviceModel.PLUS_DIMMER_10V: DeviceProfile(
            model=DeviceModel.PLUS_DIMMER_10V,
            label="Shelly Plus Dimmer 10V PM (Gen3)",
            light_id=0,
            rpc_path="/rpc",
        ),
    }
)


def resolve(model_id: str | DeviceModel | None) -> DeviceProfile:
    """Return the profile for ``model_id``, falling back to the default model."""

    try:
        model = DeviceModel(model_id)
    except ValueError:
        model = DEFAULT_MODEL
    return DEVICE_PROFILES[model]


def choices() -> list[dict[str, str]]:
    """Return dropdown choices for the model selection field."""

    return [
        {"id": profile.model_id, "label": profile.label}
        for profile in DEVICE_PROFILES.values()
    ]
