#!/usr/bin/env python3
"""
Score the areas in a JSON file and write the metrics as JSON.

Each area is either precomputed layer statistics:
  {"area_id": "a", "name": "Downtown", "area_km2": 1.2,
   "layers": {"poi-food-drink": {"feature_count": 40}, ...}}
or a polygon with clipped GeoJSON features per layer:
  {"name": "Downtown", "polygon": {...}, "features": {"parks": {"type": "FeatureCollection", ...}}}

Optionally joins an external index (CSV) to the areas by name.

Run from project root:
  PYTHONPATH=. python3 scripts/score_areas.py areas.json --output metrics.json
  PYTHONPATH=. python3 scripts/score_areas.py areas.json --index rents.csv --index-value-column rent --index-area-column name
"""
import argparse
import json
import os
import sys

# Project root for imports
SCRIPT_DIR = os.path.dirname(os.path.abspath(__file__))
ROOT = os.path.dirname(SCRIPT_DIR)
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from dotenv import load_dotenv

from data_sources.error_handling import IndexImportError
from data_sources.external_index import (
    ImportConfig,
    import_index_from_text,
    lookup_index_value,
    normalize_index_value,
)
from data_sources.layer_stats import build_area_context
from data_sources.models import AreaContext
from logging_config import get_logger, setup_logging
from pillars.area_scoring import score_areas

logger = get_logger(__name__)


def load_areas(path):
    with open(path, encoding="utf-8") as f:
        payload = json.load(f)
    raw_areas = payload.get("areas", []) if isinstance(payload, dict) else payload

    contexts = []
    for raw in raw_areas:
        if "features" in raw:
            contexts.append(build_area_context(
                raw.get("polygon"),
                raw["features"],
                area_km2=raw.get("area_km2"),
                area_id=raw.get("area_id"),
                name=raw.get("name"),
            ))
        else:
            contexts.append(AreaContext.from_dict(raw))
    return contexts


def attach_index(response, index):
    """Add the index value (raw and 0-1 normalized) to each scored area."""
    for area in response["areas"]:
        value = lookup_index_value(index, area_name=area.get("name"))
        area["external_index"] = {
            "id": index.id,
            "name": index.name,
            "value": value,
            "normalized": normalize_index_value(index, value) if value is not None else None,
        }


def main():
    load_dotenv()

    ap = argparse.ArgumentParser(description="Score areas from a JSON file")
    ap.add_argument("areas", help="JSON file with a list of areas (or {\"areas\": [...]})")
    ap.add_argument("--output", default="", help="Write JSON here instead of stdout")
    ap.add_argument("--workers", type=int, default=int(os.getenv("SCORING_MAX_WORKERS", "4")),
                    help="Areas scored in parallel (default 4)")
    ap.add_argument("--index", default="", help="CSV/TSV file with an external index to join by area name")
    ap.add_argument("--index-value-column", default="value")
    ap.add_argument("--index-area-column", default="name")
    ap.add_argument("--index-name", default="")
    ap.add_argument("--no-detect-coordinates", action="store_true",
                    help="Do not key index rows by auto-detected lat/lon columns")
    args = ap.parse_args()

    setup_logging(level=os.getenv("LOG_LEVEL", "WARNING"),
                  json_format=os.getenv("LOG_JSON", "false").lower() == "true")

    contexts = load_areas(args.areas)
    if not contexts:
        print(f"No areas found in {args.areas}", file=sys.stderr)
        sys.exit(1)

    response = score_areas(contexts, max_workers=args.workers)

    if args.index:
        with open(args.index, encoding="utf-8") as f:
            text = f.read()
        config = ImportConfig(
            name=args.index_name or os.path.splitext(os.path.basename(args.index))[0],
            value_column=args.index_value_column,
            area_column=args.index_area_column,
            detect_coordinates=not args.no_detect_coordinates,
        )
        try:
            index = import_index_from_text(text, config, filename=os.path.basename(args.index))
        except IndexImportError as e:
            print(f"Index import failed: {e}", file=sys.stderr)
            sys.exit(2)
        attach_index(response, index)

    output = json.dumps(response, indent=2, ensure_ascii=False)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output + "\n")
        print(f"Wrote {len(contexts)} area(s) to {args.output}")
    else:
        print(output)


if __name__ == "__main__":
    main()
