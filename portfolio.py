"""
Portfolio import/export

Reads and writes catalog portfolios (SoCs, sensors, functions & features) as
JSON or as flat tables (.csv/.xlsx). In tables, resource vectors are spread
over 'resources.<axis>' columns and feature dependency lists are stored as
comma-separated strings.
"""

import json
import math
import os

import pandas as pd

from models import AXIS_KEYS, SoC, Sensor, is_flagged, split_functions_and_features


KINDS = ('socs', 'sensors', 'features')
TABULAR_EXTENSIONS = ('.csv', '.xlsx')
RESOURCE_PREFIX = 'resources.'
LIST_COLUMNS = ('mandatoryFunctionIds', 'mandatorySensorIds')


def _check_kind(kind):
    if kind not in KINDS:
        raise ValueError(f"Unknown portfolio kind '{kind}' (expected one of: {', '.join(KINDS)})")


def _extension(path):
    return os.path.splitext(path)[1].lower()


def _clean(value):
    """pandas fills empty cells with NaN; treat them as missing."""
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def unflatten_row(row, kind):
    """Turn a flat table row back into the nested entry shape."""
    resources = {}
    entry = {}
    for key, value in row.items():
        value = _clean(value)
        key = str(key).strip()
        if key.startswith(RESOURCE_PREFIX):
            resources[key[len(RESOURCE_PREFIX):]] = value
        else:
            entry[key] = value

    if kind == 'features':
        for column in LIST_COLUMNS:
            value = entry.get(column)
            if isinstance(value, str):
                entry[column] = [s.strip() for s in value.split(',') if s.strip()]
            elif column in entry:
                entry[column] = []
        # only the flag decides; plain functions may carry empty id columns
        entry['isFeature'] = is_flagged(entry.get('isFeature'))

    for key in ('id', 'name'):
        if isinstance(entry.get(key), float) and entry[key].is_integer():
            entry[key] = str(int(entry[key]))
    entry['resources'] = resources
    return entry


def flatten_entry(entry):
    """Inverse of unflatten_row for a serialized entity dict."""
    flat = {k: v for k, v in entry.items() if k != 'resources'}
    for key in AXIS_KEYS:
        flat[f"{RESOURCE_PREFIX}{key}"] = entry.get('resources', {}).get(key, 0)
    for column in LIST_COLUMNS:
        if isinstance(flat.get(column), list):
            flat[column] = ", ".join(flat[column])
    return flat


def read_entries(path, kind):
    """Read raw entry dicts from a .json, .csv or .xlsx portfolio file."""
    _check_kind(kind)
    if not os.path.exists(path):
        raise FileNotFoundError(f"Portfolio file not found: {path}")

    ext = _extension(path)
    if ext == '.json':
        with open(path, 'r') as f:
            data = json.load(f)
        if not isinstance(data, list):
            raise ValueError("Invalid format: expected an array.")
        return data
    if ext in TABULAR_EXTENSIONS:
        if ext == '.csv':
            df = pd.read_csv(path)
        else:
            df = pd.read_excel(path, sheet_name=0)
        return [unflatten_row(row, kind) for row in df.to_dict(orient='records')]
    raise ValueError(f"Unsupported file type '{ext}'. Please use .json, .csv or .xlsx")


def import_portfolio(path, kind, clamp=True):
    """
    Parse a portfolio into entities.

    Returns a list of SoC or Sensor for 'socs'/'sensors', and a
    (functions, features) tuple for 'features'.
    """
    entries = read_entries(path, kind)
    if kind == 'socs':
        return [SoC.from_dict(e, clamp=clamp) for e in entries]
    if kind == 'sensors':
        return [Sensor.from_dict(e, clamp=clamp) for e in entries]
    return split_functions_and_features(entries, clamp=clamp)


def import_into(session, path, kind, clamp=True):
    """Replace the matching catalog(s) of a session with the portfolio contents."""
    imported = import_portfolio(path, kind, clamp=clamp)
    if kind == 'socs':
        session.socs = imported
        count = len(imported)
    elif kind == 'sensors':
        session.sensors = imported
        count = len(imported)
    else:
        session.functions, session.features = imported
        count = len(session.functions) + len(session.features)
    return count


def session_entries(session, kind):
    _check_kind(kind)
    if kind == 'socs':
        return [s.to_dict() for s in session.socs]
    if kind == 'sensors':
        return [s.to_dict() for s in session.sensors]
    return [f.to_dict() for f in session.functions] + [f.to_dict() for f in session.features]


def to_dataframe(entries):
    return pd.DataFrame([flatten_entry(e) for e in entries])


def export_portfolio(entries, path):
    """Write serialized entries to .json, .csv or .xlsx depending on the extension."""
    ext = _extension(path)
    directory = os.path.dirname(path)
    if directory and not os.path.exists(directory):
        os.makedirs(directory)

    if ext == '.json':
        with open(path, 'w') as f:
            json.dump(entries, f, indent=2)
    elif ext == '.csv':
        to_dataframe(entries).to_csv(path, index=False)
    elif ext == '.xlsx':
        to_dataframe(entries).to_excel(path, index=False, sheet_name='Data')
    else:
        raise ValueError(f"Unsupported file type '{ext}'. Please use .json, .csv or .xlsx")
    return path


EXPORT_NAMES = {
    'socs': 'soc-portfolio',
    'sensors': 'sensor-portfolio',
    'features': 'functions-features-portfolio',
}


def export_session(session, export_dir, fmt='xlsx'):
    """Export all three portfolios of a session; returns the written paths."""
    paths = []
    for kind in KINDS:
        path = os.path.join(export_dir, f"{EXPORT_NAMES[kind]}.{fmt}")
        paths.append(export_portfolio(session_entries(session, kind), path))
    return paths
