"""
Write the parameter override workbook from the current built-in constants.

    python generate_config.py [output.xlsx]

Edit the Value column and point ROUTE_CARBON_PARAMETERS at the file (or keep it
at data/parameters_config/carbon_parameters.xlsx) to override factors.
"""
import os
import sys
import pandas as pd
from route_carbon import constants
from route_carbon.config import DEFAULT_CONFIG_PATH

SECTIONS = {
    "EMISSIONFACTOR_CAR": "1. Car",
    "EMISSIONFACTOR_TRAIN": "2. Train",
    "EMISSIONFACTOR_BUS": "3. Bus",
    "EMISSIONFACTOR_PLANE": "4. Plane",
    "EMISSIONFACTOR_METRO": "5. Metro & Active Travel",
    "EMISSIONFACTOR_BIKE": "5. Metro & Active Travel",
    "EMISSIONFACTOR_WALK": "5. Metro & Active Travel",
}


def describe(key: str):
    """(Unit, Section, Description) for a parameter key."""
    if key == "DECIMALS":
        return "Integer", "0. Global Settings", "Number of decimal places used in reports."
    for prefix, section in SECTIONS.items():
        if key.startswith(prefix):
            variant = key[len(prefix):].strip("_").lower().replace("_", " ") or "base"
            mode = prefix.replace("EMISSIONFACTOR_", "").lower()
            return "kgCO2e/km", section, f"Emission factor for {mode} ({variant})."
    return None


def generate_excel(output_file: str = DEFAULT_CONFIG_PATH):
    data = []
    for name in dir(constants):
        info = describe(name)
        if info is None:
            continue
        unit, section, description = info
        data.append({
            "Key": name,
            "Value": getattr(constants, name),
            "Unit": unit,
            "Section": section,
            "Description": description,
        })

    df = pd.DataFrame(data).sort_values(["Section", "Key"])
    df = df[["Key", "Value", "Unit", "Section", "Description"]]

    os.makedirs(os.path.dirname(os.path.abspath(output_file)), exist_ok=True)
    print(f"Generating {output_file}...")
    df.to_excel(output_file, index=False)
    print("Done.")


if __name__ == "__main__":
    generate_excel(sys.argv[1] if len(sys.argv) > 1 else DEFAULT_CONFIG_PATH)
