"""
Award export for the report assembler.

Turns award records into pandas DataFrames with display names and formatted
times, and writes them as one JSON document or one CSV file per award.
"""

import json
import logging
from dataclasses import asdict, is_dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Union

import pandas as pd

from data_pipeline.campaign_maps.medals import Medal

logger = logging.getLogger(__name__)


def load_member_names(path: Union[str, Path]) -> Dict[str, str]:
    """
    Load the static player id -> display name map.

    A missing file is not an error; every player is then shown by id.
    """
    path = Path(path)
    if not path.exists():
        logger.warning(f"Member file {path} not found, players will be shown by id")
        return {}

    with open(path, 'r', encoding='utf-8') as f:
        members = json.load(f)

    if not isinstance(members, dict):
        raise ValueError(f"Member file {path} must contain a JSON object of id -> name")

    logger.info(f"Loaded {len(members)} member names from {path}")
    return members


def display_name(user_id: str, member_names: Dict[str, str]) -> str:
    return member_names.get(user_id) or user_id


def format_race_time(ms: int) -> str:
    """
    Format a race time.

    Examples:
        45123 -> '45.123s'
        83456 -> '1:23.456'
    """
    if ms < 60000:
        return f"{ms / 1000:.3f}s"
    minutes, remainder = divmod(ms, 60000)
    return f"{minutes}:{remainder / 1000:06.3f}"


def _plain(value: Any) -> Any:
    """Convert nested dataclass output to JSON-friendly values."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: _plain(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_plain(item) for item in value]
    return value


def _record_to_row(record, member_names: Dict[str, str]) -> Dict[str, Any]:
    row = _plain(asdict(record))
    row['player'] = display_name(record.user_id, member_names)

    if 'time' in row:
        row['time_display'] = format_race_time(row['time'])
    if isinstance(getattr(record, 'medal', None), Medal):
        row['medal_emoji'] = record.medal.emoji

    # Derived properties are not part of asdict()
    featured = getattr(record, 'featured', None)
    if is_dataclass(featured):
        for key, value in _plain(asdict(featured)).items():
            row[f'featured_{key}'] = value
    if hasattr(record, 'length'):
        row['length'] = record.length
    if hasattr(record, 'total_points'):
        row['total_points'] = record.total_points

    return row


def awards_to_frames(awards: Dict[str, list], member_names: Dict[str, str]) -> Dict[str, pd.DataFrame]:
    """
    Flatten award records into one DataFrame per award.

    Nested instance lists (close calls, narrow victories, streak runs) stay
    as lists of dicts in their column.

    Args:
        awards: Award name -> records, as returned by AwardsEngine.compute_all()
        member_names: Player id -> display name

    Returns:
        Award name -> DataFrame with a 1-based 'rank' column
    """
    frames = {}
    for name, records in awards.items():
        rows = [_record_to_row(record, member_names) for record in records]
        df = pd.DataFrame(rows)
        if not df.empty:
            df.insert(0, 'rank', range(1, len(df) + 1))
        frames[name] = df
    return frames


def write_awards_json(frames: Dict[str, pd.DataFrame], output_path: Union[str, Path],
                      season: int = None) -> Path:
    """Write all awards to one JSON document."""
    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    document = {
        'season': season,
        'awards': {name: df.to_dict(orient='records') for name, df in frames.items()}
    }

    with open(output_path, 'w', encoding='utf-8') as f:
        json.dump(document, f, indent=2, ensure_ascii=False)

    logger.info(f"Wrote {len(frames)} awards to {output_path}")
    return output_path


def _flatten_for_csv(df: pd.DataFrame) -> pd.DataFrame:
    """Replace list columns: lists of records become counts, lists of values are joined."""
    df = df.copy()
    for column in df.columns:
        if not df[column].map(lambda value: isinstance(value, list)).any():
            continue
        if df[column].map(lambda value: isinstance(value, list) and bool(value)
                          and isinstance(value[0], dict)).any():
            df[column] = df[column].map(len)
        else:
            df[column] = df[column].map(lambda values: ", ".join(str(v) for v in values))
    return df


def write_awards_csv(frames: Dict[str, pd.DataFrame], output_dir: Union[str, Path]) -> List[Path]:
    """Write one CSV file per award into output_dir."""
    output_dir = Path(output_dir)
    output_dir.mkdir(parents=True, exist_ok=True)

    written = []
    for name, df in frames.items():
        path = output_dir / f"{name}.csv"
        _flatten_for_csv(df).to_csv(path, index=False)
        written.append(path)

    logger.info(f"Wrote {len(written)} award files to {output_dir}")
    return written
