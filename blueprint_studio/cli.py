from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from collections.abc import Sequence

from blueprint_studio import __version__
from blueprint_studio.cp import build_default_nav, build_script_config
from blueprint_studio.foundation.config_io import load_config
from blueprint_studio.foundation.logging_utils import setup_logger
from blueprint_studio.framework.config import StudioConfig
from blueprint_studio.framework.fieldset_io import (
    dump_blueprint_fields,
    dump_editor_fields,
    load_blueprint_fields,
    load_editor_fields,
    load_fieldsets,
)
from blueprint_studio.framework.term_io import load_term_file
from blueprint_studio.impl.fieldtypes import get_fieldtype_registry
from fieldkit.nested_fields import preprocess, preprocess_config, process

logger = logging.getLogger("blueprint_studio.cli")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="blueprint-studio", add_help=True)
    parser.add_argument("--config", dest="config_path", help="Settings YAML (default: config/config.yaml)")
    parser.add_argument("--fieldsets", dest="fieldsets_dir", help="Directory of <handle>.yaml fieldsets")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log at DEBUG level")
    sub = parser.add_subparsers(dest="command", required=True)

    pre = sub.add_parser("preprocess", help="Blueprint YAML -> editor JSON")
    pre.add_argument("blueprint")

    proc = sub.add_parser("process", help="Editor JSON -> blueprint YAML")
    proc.add_argument("editor")

    pre_cfg = sub.add_parser("preprocess-config", help="Blueprint YAML -> flat preprocessed field configs")
    pre_cfg.add_argument("blueprint")

    sub.add_parser("list-fieldtypes", help="List registered fieldtypes")
    sub.add_parser("list-fieldsets", help="List fieldsets found in the fieldsets directory")

    script = sub.add_parser("script-config", help="Print the front-end runtime config as JSON")
    script.add_argument("--url-path", default="/", help="Request path the page is rendered for")
    script.add_argument("--locale", default="en")

    nav = sub.add_parser("nav", help="Print the control panel navigation by section")
    nav.add_argument("--path", default=None, help="Request path used to mark the active item")

    term = sub.add_parser("term", help="Show a taxonomy term <taxonomy>/<slug>.yaml in one locale")
    term.add_argument("path")
    term.add_argument("--locale", default=None, help="Site handle (default: the first configured site)")

    return parser


def _load_settings(args: argparse.Namespace) -> StudioConfig:
    try:
        cfg_dict, meta = load_config(config_path=args.config_path) if args.config_path else load_config()
    except FileNotFoundError:
        if args.config_path:
            raise
        cfg_dict, meta = {}, {"paths": [], "repo_root": None}

    base_dir = meta.get("repo_root")
    if not base_dir and meta.get("paths"):
        base_dir = os.path.dirname(meta["paths"][0])

    cfg, warnings = StudioConfig.from_dict(cfg_dict, base_dir=base_dir)
    for warning in warnings:
        logger.warning("%s", warning)
    return cfg


def _run(args: argparse.Namespace) -> int:
    cfg = _load_settings(args)
    level = "debug" if args.verbose else cfg.log_level
    for name in ("blueprint_studio", "fieldkit"):
        setup_logger(name, level=level, log_path=cfg.log_path)

    fieldtypes = get_fieldtype_registry(cfg.custom_fieldtypes)

    if args.command == "list-fieldtypes":
        for row in fieldtypes.describe():
            print(f"{row['handle']:<12} component={row['component']:<10} {row['doc'] or ''}".rstrip())
        return 0

    if args.command == "script-config":
        payload = build_script_config(
            cfg,
            fieldtypes=fieldtypes,
            version=__version__,
            url_path=args.url_path,
            locale=args.locale,
        )
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    if args.command == "term":
        sites = tuple(site.handle for site in cfg.sites) or ("default",)
        localized = load_term_file(args.path, sites=sites).in_locale(args.locale or sites[0])
        payload = {
            "id": localized.id,
            "taxonomy": localized.taxonomy,
            "locale": localized.locale,
            "slug": localized.slug,
            "title": localized.title(),
            "has_origin": localized.has_origin(),
            "values": localized.values(),
        }
        print(json.dumps(payload, ensure_ascii=False, indent=2))
        return 0

    if args.command == "process":
        fields = process(load_editor_fields(args.editor), default_width=cfg.default_width)
        sys.stdout.write(dump_blueprint_fields(fields))
        return 0

    fieldsets = load_fieldsets(args.fieldsets_dir or cfg.fieldsets_path)

    if args.command == "list-fieldsets":
        for handle in fieldsets.available():
            fieldset = fieldsets.get(handle)
            print(f"{handle}: {len(fieldset.fields)} field(s)")
        return 0

    if args.command == "nav":
        nav = build_default_nav(cfg.cp_route, fieldset_handles=fieldsets.available())
        for section, items in nav.build().items():
            print(section)
            for item in items:
                marker = "*" if args.path and item.is_active(args.path) else " "
                print(f" {marker} {item.name:<12} {item.url}")
                for child in item.children or ():
                    child_marker = "*" if args.path and child.is_active(args.path) else " "
                    print(f"   {child_marker} {child.name:<10} {child.url}")
        return 0

    if args.command == "preprocess":
        fields = preprocess(
            load_blueprint_fields(args.blueprint),
            fieldtypes=fieldtypes,
            fieldsets=fieldsets,
            default_width=cfg.default_width,
        )
        print(dump_editor_fields(fields))
        return 0

    if args.command == "preprocess-config":
        fields = preprocess_config(load_blueprint_fields(args.blueprint), fieldtypes=fieldtypes, fieldsets=fieldsets)
        print(dump_editor_fields(fields))
        return 0

    raise AssertionError(f"Unhandled command: {args.command}")


def main(argv: Sequence[str] | None = None) -> int:
    args = build_parser().parse_args(list(argv) if argv is not None else None)
    try:
        return _run(args)
    except (ValueError, TypeError, FileNotFoundError) as exc:
        print(f"blueprint-studio: error: {exc}", file=sys.stderr)
        return 2


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main(sys.argv[1:]))
