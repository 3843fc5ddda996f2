"""CLI entry point for championship ingestion.

Provides ``main()`` as the sync entry point for the ``championship-index``
console script, and ``async_main(args)`` which sets up logging, builds the
client, runs the selected command, and prints an end-of-run summary.

Usage::

    championship-index build --division Open --season 55
    championship-index build --division Open --season 55 --with-stats
    championship-index build --division Main --season 54 --compressed
    championship-index veto --team-a <id> --team-b <id> --format BO1

The API key comes from ``--api-key`` or the ``FACEIT_API_KEY`` variable.
"""

import argparse
import asyncio
import logging
import os

from championship.config import ChampionshipConfig
from championship.exceptions import ChampionshipError
from championship.http_client import FaceitClient
from championship.logging_config import setup_logging
from championship.models import ChampionshipDatabase, VetoPrediction
from championship.pipeline import run_pipeline
from championship.registry import get_championship_ids, load_registry
from championship.storage import ExportStorage
from championship.veto import profile_from_team_stats, predict_veto

logger = logging.getLogger(__name__)


def _positive_int(value: str) -> int:
    """argparse type for counts that must be at least 1."""
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}") from None
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be >= 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the championship-index CLI."""
    parser = argparse.ArgumentParser(
        prog="championship-index",
        description="Index FACEIT championship teams, players and matches",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default="data",
        help="Data directory for logs and exports (default: data)",
    )
    parser.add_argument(
        "--api-key",
        type=str,
        default=None,
        help="FACEIT Data API key (default: $FACEIT_API_KEY)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    build = subparsers.add_parser("build", help="Fetch championships and build the database")
    build.add_argument("--division", required=True, help='Division name, e.g. "Open"')
    build.add_argument("--season", required=True, help='Season number, e.g. "55"')
    build.add_argument(
        "--championships-file",
        type=str,
        default="championships.yml",
        help="Championship registry (default: championships.yml)",
    )
    build.add_argument(
        "--with-stats",
        action="store_true",
        help="Also fetch detailed per-match statistics (one request per match)",
    )
    build.add_argument(
        "--compressed",
        action="store_true",
        help="Save the compressed export (no rosters, no match stats)",
    )
    build.add_argument(
        "--name",
        type=str,
        default=None,
        help="Export name (default: <division>-s<season>)",
    )
    build.add_argument(
        "--concurrency",
        type=_positive_int,
        default=None,
        help="Match stats requests in flight (default: 5)",
    )

    veto = subparsers.add_parser("veto", help="Predict the map veto between two teams")
    veto.add_argument("--team-a", required=True, help="FACEIT team id of the first team to ban")
    veto.add_argument("--team-b", required=True, help="FACEIT team id of the other team")
    veto.add_argument(
        "--format",
        dest="veto_format",
        choices=["BO1", "BO3"],
        default="BO3",
        help="Match format (default: BO3)",
    )
    return parser


def _format_build_summary(db: ChampionshipDatabase, path: str, log_file: str) -> str:
    """Format the database build into a human-readable summary string."""
    meta = db.metadata
    earliest = meta.date_range.earliest
    latest = meta.date_range.latest
    lines = [
        "=" * 60,
        "Build complete",
        "-" * 60,
        f"Matches:       {meta.total_matches}",
        f"Teams:         {meta.total_teams}",
        f"Players:       {meta.total_players}",
        f"Championships: {len(meta.championships)}",
        "Date range:    {} .. {}".format(
            earliest.date() if earliest else "-",
            latest.date() if latest else "-",
        ),
    ]
    if meta.dropped_collections:
        failed = [o.collection_id for o in meta.collections if o.status == "failed"]
        lines.append(f"Failed:        {meta.dropped_collections} ({', '.join(failed)})")
    if meta.missing_stats:
        lines.append(f"Missing stats: {meta.missing_stats}")
    lines += [
        "-" * 60,
        f"Export:        {path}",
        f"Log file:      {log_file}",
        "=" * 60,
    ]
    return "\n".join(lines)


def _format_veto(prediction: VetoPrediction) -> str:
    lines = [f"{prediction.format} veto prediction"]
    for step in prediction.steps:
        lines.append(
            f"  {step.step_number}. {step.team} {step.action:<7} "
            f"{step.map_name:<10} {step.reason}"
        )
    lines.append(f"Predicted pool: {', '.join(prediction.predicted_pool) or '-'}")
    for diff in prediction.high_diff_maps:
        lines.append(
            f"  {diff.map_name}: {diff.team_a_win_rate:g}% vs "
            f"{diff.team_b_win_rate:g}% (gap {diff.gap:g})"
        )
    return "\n".join(lines)


async def _run_build(args: argparse.Namespace, config: ChampionshipConfig, log_file) -> None:
    registry = load_registry(args.championships_file)
    championship_ids = get_championship_ids(registry, args.division, args.season)
    logger.info(
        "Found %d unique championships for %s Season %s",
        len(championship_ids), args.division, args.season,
    )

    async with FaceitClient(config) as client:
        db = await run_pipeline(
            client, config, championship_ids, with_stats=args.with_stats,
        )
        logger.info("Client stats: %s", client.stats())

    name = args.name or f"{args.division.lower()}-s{args.season}"
    if args.compressed:
        name = f"{name}-compressed"
    path = ExportStorage(config.data_dir).save(db, name, compressed=args.compressed)
    logger.info("\n%s", _format_build_summary(db, str(path), str(log_file)))


async def _run_veto(args: argparse.Namespace, config: ChampionshipConfig) -> None:
    async with FaceitClient(config) as client:
        profiles = []
        for team_id in (args.team_a, args.team_b):
            team = await client.get_team(team_id)
            team_stats = await client.get_team_stats(team_id)
            profiles.append(profile_from_team_stats(team, team_stats))

    prediction = predict_veto(profiles[0], profiles[1], args.veto_format)
    logger.info("\n%s", _format_veto(prediction))


async def async_main(args: argparse.Namespace) -> int:
    """Async entry point: set up components, run the command, report.

    Returns:
        Process exit code.
    """
    log_file = setup_logging(data_dir=args.data_dir, run_label=args.command)

    config_overrides = {
        "data_dir": args.data_dir,
        "api_key": args.api_key or os.environ.get("FACEIT_API_KEY"),
    }
    if args.command == "build":
        config_overrides["championships_file"] = args.championships_file
        if args.concurrency is not None:
            config_overrides["stats_concurrency"] = args.concurrency
    config = ChampionshipConfig(**config_overrides)

    if not config.api_key:
        logger.warning("No API key given; FACEIT will reject most requests")

    try:
        if args.command == "build":
            await _run_build(args, config, log_file)
        else:
            await _run_veto(args, config)
    except ChampionshipError as exc:
        logger.error("%s failed: %s", args.command, exc)
        return 1
    finally:
        logging.shutdown()
    return 0


def main() -> None:
    """Sync entry point for the championship-index console script."""
    parser = build_parser()
    args = parser.parse_args()
    try:
        code = asyncio.run(async_main(args))
    except KeyboardInterrupt:
        code = 130
    raise SystemExit(code)


if __name__ == "__main__":
    main()
