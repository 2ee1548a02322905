"""
Rig retarget - command line entry point.

Maps the bones of a target rig onto the reference rig, optionally applies
the configured chain corrections to the target rest pose and writes the
result out as YAML.

Rig files are YAML: either a list of bone records or a mapping with a
``bones`` list. Each record carries ``name`` and optionally ``parent``,
``position``, ``rotation`` (x, y, z, w) and ``scale``.
"""

import argparse
from pathlib import Path
from typing import Dict, Optional

import yaml

from rigretarget.automap import BoneAutoMapper, TargetBoneMappingType
from rigretarget.core import Config, setup_logging_from_config, get_logger
from rigretarget.pose import Pose, Skeleton
from rigretarget.retarget import (
    HumanChainConfig,
    apply_corrections,
    build_chain_table,
    corrections_from_config,
)

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def parse_args(argv=None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Map a rig onto the reference skeleton and apply chain corrections"
    )
    parser.add_argument(
        "--source", "-s",
        type=str,
        required=True,
        help="Source (reference) rig description file"
    )
    parser.add_argument(
        "--target", "-t",
        type=str,
        required=True,
        help="Target rig description file"
    )
    parser.add_argument(
        "--config", "-c",
        type=str,
        default="config.yaml",
        help="Path to configuration file"
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write mapping and target pose to this YAML file"
    )
    parser.add_argument(
        "--mapping-type",
        choices=[t.value for t in TargetBoneMappingType],
        help="Force a mapping strategy (overrides config)"
    )
    parser.add_argument(
        "--apply-corrections",
        action="store_true",
        help="Apply retarget.corrections from the config to the target pose"
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging"
    )
    return parser.parse_args(argv)


def load_rig(path: str) -> Skeleton:
    """Load a rig description file."""
    with open(path, "r") as f:
        data = yaml.safe_load(f) or []

    if isinstance(data, dict):
        records = data.get("bones", [])
    else:
        records = data

    return Skeleton.from_records(records)


def main(argv=None) -> int:
    """Main application entry point."""
    args = parse_args(argv)

    config_path = Path(args.config)
    if not config_path.is_absolute() and not config_path.exists():
        config_path = PROJECT_ROOT / config_path

    try:
        config = Config(str(config_path))
    except FileNotFoundError:
        print(f"Error: Config file not found: {config_path}")
        return 1

    setup_logging_from_config(config, "DEBUG" if args.debug else None)
    logger = get_logger("main")

    logger.info("=" * 50)
    logger.info(f"Rig retarget v{config.get('app.version', '0.1.0')}")
    logger.info("=" * 50)

    if args.mapping_type:
        config.set("automap.mapping_type", args.mapping_type)
        logger.info(f"Mapping type override: {args.mapping_type}")

    try:
        source = load_rig(args.source)
        target = load_rig(args.target)
    except (OSError, yaml.YAMLError, KeyError, ValueError) as e:
        logger.error(f"Failed to load rig: {e}")
        return 1

    logger.info(f"Source rig: {len(source)} bones, target rig: {len(target)} bones")

    mapping_type = config.get("automap.mapping_type")
    if mapping_type is not None:
        try:
            mapping_type = TargetBoneMappingType(mapping_type)
        except ValueError:
            choices = ", ".join(t.value for t in TargetBoneMappingType)
            logger.error(f"Invalid automap.mapping_type '{mapping_type}' (expected one of: {choices})")
            return 1

    mapping = BoneAutoMapper.auto_map_bones(source, target, mapping_type)
    if not mapping:
        logger.error("No bones could be mapped between source and target")
        return 1

    coverage = len(mapping) / max(len(target), 1)
    logger.info(f"Mapped {len(mapping)} / {len(target)} target bones ({coverage:.0%})")

    min_coverage = config.get("automap.min_coverage", 0.0)
    if coverage < min_coverage:
        logger.warning(f"Mapping coverage below configured minimum of {min_coverage:.0%}")

    if args.apply_corrections:
        run_corrections(config, target, mapping)

    if args.output:
        write_output(args.output, mapping, target)
        logger.info(f"Wrote {args.output}")

    return 0


def run_corrections(config: Config, target: Skeleton, mapping: Dict[str, str]) -> int:
    """Apply configured chain corrections to the target rig's rest pose."""
    logger = get_logger("main")

    preset = config.get("retarget.source_chains", "reference")
    source_chains = HumanChainConfig.get_preset(preset)
    target_chains = HumanChainConfig.target_config_from_mapping(source_chains, mapping)

    pose = Pose(target)
    chains = build_chain_table(pose, target_chains)
    ops = corrections_from_config(config.get("retarget.corrections", []))

    if not ops:
        logger.info("No chain corrections configured")
        return 0

    working = pose.clone()
    applied = apply_corrections(working, chains, ops)
    working.write_back(target)

    logger.info(f"Applied {applied} / {len(ops)} chain corrections")
    return applied


def write_output(path: str, mapping: Dict[str, str], target: Optional[Skeleton]) -> None:
    output = {"mapping": dict(mapping)}
    if target is not None:
        output["bones"] = target.to_records()

    out_path = Path(path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w") as f:
        yaml.safe_dump(output, f, default_flow_style=False, sort_keys=False)
