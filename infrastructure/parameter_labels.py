"""
Axis labels for SWMP parameters, keyed by parameter name.
"""

from types import MappingProxyType

PARAMETER_LABELS = MappingProxyType({
    # water quality
    'temp': 'Temperature (C)',
    'spcond': 'Specific conductivity (mS/cm)',
    'sal': 'Salinity (psu)',
    'do_pct': 'Dissolved oxygen (%)',
    'do_mgl': 'Dissolved oxygen (mg/L)',
    'depth': 'Depth (m)',
    'cdepth': 'Depth (nonvented, m)',
    'level': 'Referenced depth (m)',
    'clevel': 'Referenced depth (nonvented, m)',
    'ph': 'pH',
    'turb': 'Turbidity (NTU)',
    'chlfluor': 'Chl fluorescence (ug/L)',
    # weather
    'atemp': 'Air temperature (C)',
    'rh': 'Relative humidity (%)',
    'bp': 'Barometric pressure (mb)',
    'wspd': 'Wind speed (m/s)',
    'maxwspd': 'Max wind speed (m/s)',
    'wdir': 'Wind direction (degrees)',
    'sdwdir': 'Wind direction (sd, degrees)',
    'totpar': 'Total PAR (mmol/m2)',
    'totprcp': 'Total precipitation (mm)',
    'cumprcp': 'Cumulative precipitation (mm)',
    'totsorad': 'Total solar radiation (watts/m2)',
    # nutrients
    'po4f': 'Orthophosphate (mg/L)',
    'nh4f': 'Ammonium (mg/L)',
    'no2f': 'Nitrite (mg/L)',
    'no3f': 'Nitrate (mg/L)',
    'no23f': 'Nitrite + Nitrate (mg/L)',
    'chla_n': 'Chlorophyll (ug/L)',
})


def get_parameter_label(parameter: str) -> str:
    """Human-readable label for ``parameter``, or the name itself if unknown"""
    return PARAMETER_LABELS.get(parameter, parameter)
