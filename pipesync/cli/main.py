#!/usr/bin/env python3
"""pipesync CLI - thin command line front end for the pipeline resource adapters."""

import argparse
import sys
from pathlib import Path

from pipesync.client import ConcourseClient
from pipesync.exceptions import ConfigurationError, PipesyncError
from pipesync.models import ConfigFormat
from pipesync.services.pipeline import (
    ManagedPipeline,
    ManagedPipelineInput,
    PipelineLookup,
    PipelineLookupInput,
    PipelineReader,
    PipelineReconciler,
    json_to_json,
    json_to_yaml,
    make_identity,
    yaml_to_json,
)
from pipesync.settings import settings
from pipesync.utils.logger import logger


def _format_from_path(path: Path) -> ConfigFormat:
    return ConfigFormat.JSON if path.suffix.lower() == ".json" else ConfigFormat.YAML


def _team(args: argparse.Namespace) -> str:
    return args.team or settings.default_team


def _build_client(args: argparse.Namespace) -> ConcourseClient:
    url = args.url or settings.concourse_url
    if not url:
        raise ConfigurationError(
            "No Concourse URL configured (set PIPESYNC_CONCOURSE_URL or --url)"
        )
    return ConcourseClient(
        url,
        token=args.token or settings.concourse_token,
        timeout=settings.request_timeout,
        log_requests=settings.log_requests,
    )


def show_pipeline(args: argparse.Namespace) -> None:
    """Print the stored config of a pipeline."""
    with _build_client(args) as client:
        result = PipelineLookup(PipelineReader(client)).read(
            PipelineLookupInput(team_name=_team(args), pipeline_name=args.pipeline)
        )

    logger.info(f"{result.id}: exposed={result.is_exposed} paused={result.is_paused}")
    print(result.config_json if args.format == ConfigFormat.JSON else result.config_yaml)


def apply_pipeline(args: argparse.Namespace) -> None:
    """Upload a config file and reconcile the pipeline flags."""
    config_path = Path(args.config_file)
    config_format = args.format or _format_from_path(config_path)

    params = ManagedPipelineInput(
        team_name=_team(args),
        pipeline_name=args.pipeline,
        is_exposed=args.is_exposed,
        is_paused=args.is_paused,
        pipeline_config_format=config_format,
        pipeline_config=config_path.read_text(encoding="utf-8"),
    )

    with _build_client(args) as client:
        resource = ManagedPipeline(PipelineReconciler(client, write_mode=settings.write_mode))
        result = resource.update(params)

    logger.info(f"Applied {result.id}: exposed={result.is_exposed} paused={result.is_paused}")


def delete_pipeline(args: argparse.Namespace) -> None:
    """Delete a pipeline."""
    identity = make_identity(_team(args), args.pipeline)
    with _build_client(args) as client:
        PipelineReconciler(client).delete(identity)


def convert_config(args: argparse.Namespace) -> None:
    """Convert a config file between JSON and YAML without contacting the server."""
    path = Path(args.file)
    raw = path.read_text(encoding="utf-8")
    source = _format_from_path(path)

    canonical = yaml_to_json(raw) if source == ConfigFormat.YAML else json_to_json(raw)
    print(canonical if args.to == ConfigFormat.JSON else json_to_yaml(canonical))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pipesync", description="pipesync CLI - reconcile Concourse pipeline definitions"
    )
    parser.add_argument("--url", type=str, default=None, help="Concourse URL (overrides settings)")
    parser.add_argument("--token", type=str, default=None, help="Bearer token (overrides settings)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    show_parser = subparsers.add_parser("show", help="Show a pipeline's config and flags")
    show_parser.add_argument(
        "--team", default=None, help="Team name (default: settings.default_team)"
    )
    show_parser.add_argument("pipeline", help="Pipeline name")
    show_parser.add_argument(
        "--format", type=ConfigFormat, default=ConfigFormat.YAML, help="Output format"
    )
    show_parser.set_defaults(handler=show_pipeline)

    apply_parser = subparsers.add_parser("apply", help="Upload a config and set flags")
    apply_parser.add_argument(
        "--team", default=None, help="Team name (default: settings.default_team)"
    )
    apply_parser.add_argument("pipeline", help="Pipeline name")
    apply_parser.add_argument("config_file", help="Path to the pipeline config")
    apply_parser.add_argument(
        "--format",
        type=ConfigFormat,
        default=None,
        help="Config format (default: inferred from the file suffix)",
    )
    visibility = apply_parser.add_mutually_exclusive_group()
    visibility.add_argument("--expose", dest="is_exposed", action="store_true")
    visibility.add_argument("--hide", dest="is_exposed", action="store_false")
    pausing = apply_parser.add_mutually_exclusive_group()
    pausing.add_argument("--pause", dest="is_paused", action="store_true")
    pausing.add_argument("--unpause", dest="is_paused", action="store_false")
    apply_parser.set_defaults(handler=apply_pipeline, is_exposed=False, is_paused=False)

    delete_parser = subparsers.add_parser("delete", help="Delete a pipeline")
    delete_parser.add_argument(
        "--team", default=None, help="Team name (default: settings.default_team)"
    )
    delete_parser.add_argument("pipeline", help="Pipeline name")
    delete_parser.set_defaults(handler=delete_pipeline)

    convert_parser = subparsers.add_parser("convert", help="Convert a config between formats")
    convert_parser.add_argument("file", help="Path to the config")
    convert_parser.add_argument("--to", type=ConfigFormat, required=True, help="Target format")
    convert_parser.set_defaults(handler=convert_config)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(1)

    try:
        args.handler(args)
    except (PipesyncError, OSError) as e:
        logger.error(str(e))
        sys.exit(1)


if __name__ == "__main__":
    main()
