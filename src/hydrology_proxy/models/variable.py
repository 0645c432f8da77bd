"""
Hydrological variable models.

Known variables form a closed enumeration; any other key is carried as an
UnknownVariable so lookups never fall through silently.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union


class Variable(Enum):
    """Hydrological/weather quantities tracked by the proxy."""

    PRECIPITATION = "precipitation"
    SOIL_MOISTURE = "soilMoisture"
    RUNOFF = "runoff"
    EVAPOTRANSPIRATION = "evapotranspiration"
    TEMPERATURE = "temperature"
    HUMIDITY = "humidity"

    @property
    def key(self) -> str:
        return self.value

    @property
    def info(self) -> "VariableInfo":
        return VARIABLE_INFO[self]

    @property
    def dataset_id(self) -> str:
        return self.info.dataset_id


@dataclass(frozen=True)
class UnknownVariable:
    """A variable key outside the known set, kept verbatim."""

    key: str

    @property
    def info(self) -> "VariableInfo":
        return VariableInfo(
            dataset_id=self.key,
            unit=UNKNOWN_UNIT,
            description=UNKNOWN_DESCRIPTION,
        )

    @property
    def dataset_id(self) -> str:
        return self.key


@dataclass(frozen=True)
class VariableInfo:
    """Static metadata for a variable."""

    dataset_id: str
    unit: str
    description: str


VariableKey = Union[Variable, UnknownVariable]

UNKNOWN_UNIT = "units"
UNKNOWN_DESCRIPTION = "Unknown parameter"

VARIABLE_INFO: Dict[Variable, VariableInfo] = {
    Variable.PRECIPITATION: VariableInfo(
        dataset_id="GPM_3IMERGDF_06_precipitation",
        unit="mm/day",
        description="Daily precipitation from GPM IMERG",
    ),
    Variable.SOIL_MOISTURE: VariableInfo(
        dataset_id="GLDAS_NOAH025_3H_2_1_SoilMoi0_10cm_inst",
        unit="m³/m³",
        description="Soil moisture content (0-10cm depth)",
    ),
    Variable.RUNOFF: VariableInfo(
        dataset_id="GLDAS_NOAH025_3H_2_1_Qs_acc",
        unit="mm/day",
        description="Surface runoff",
    ),
    Variable.EVAPOTRANSPIRATION: VariableInfo(
        dataset_id="GLDAS_NOAH025_3H_2_1_Evap_tavg",
        unit="mm/day",
        description="Evapotranspiration rate",
    ),
    Variable.TEMPERATURE: VariableInfo(
        dataset_id="GLDAS_NOAH025_3H_2_1_Tair_f_inst",
        unit="°C",
        description="Air temperature at 2m height",
    ),
    Variable.HUMIDITY: VariableInfo(
        dataset_id="GLDAS_NOAH025_3H_2_1_Qair_f_inst",
        unit="%",
        description="Relative humidity",
    ),
}

_BY_KEY: Dict[str, Variable] = {variable.value: variable for variable in Variable}


def parse_variable(key: Union[str, Variable, UnknownVariable]) -> VariableKey:
    """
    Resolve a request key to a known Variable or an UnknownVariable.

    Args:
        key: Variable key as sent by the client (e.g. 'soilMoisture')

    Returns:
        Variable member, or UnknownVariable carrying the raw key
    """
    if isinstance(key, (Variable, UnknownVariable)):
        return key
    return _BY_KEY.get(key, UnknownVariable(key))


def known_variable_keys():
    """Keys of every known variable, in declaration order."""
    return [variable.key for variable in Variable]
