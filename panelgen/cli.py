"""Command-line inspection of presets, compatibility and resolved configurations."""

import argparse
import logging

from dotenv import load_dotenv
from rich.box import ROUNDED
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .engine import ResolutionOptions, create_config_engine
from .enums import DimensionKey, ModelFamily
from .models import get_model_resolver, recommended_stack, suggest_adapters
from .presets import (
    estimate_relative_time,
    get_presets_by_category,
    get_model_preset,
    list_model_families,
    list_quality_presets,
    recommended_cfg_range,
)
from .strategies import ContextFreeStrategy

console = Console()


def show_presets(args: argparse.Namespace) -> None:
    if args.kind in ("size", "all"):
        table = Table(title="Size presets", box=ROUNDED, header_style="bold")
        table.add_column("Category")
        table.add_column("Id", style="cyan")
        table.add_column("Aspect", justify="right")
        table.add_column("SDXL", justify="right")
        table.add_column("Uses", style="dim")
        for category, presets in get_presets_by_category().items():
            for preset in presets:
                dims = preset.dimensions_for(DimensionKey.SDXL)
                table.add_row(
                    category.value,
                    preset.id,
                    f"{preset.aspect_ratio:.3f}",
                    f"{dims.width}x{dims.height}",
                    ", ".join(preset.suggested_uses),
                )
        console.print(table)

    if args.kind in ("quality", "all"):
        table = Table(title="Quality presets", box=ROUNDED, header_style="bold")
        for column in ("Id", "Steps", "CFG", "Sampler", "Scheduler", "Relative time"):
            table.add_column(column)
        for preset in list_quality_presets():
            table.add_row(
                preset.id,
                str(preset.steps),
                f"{preset.cfg:g}",
                preset.sampler,
                preset.scheduler,
                f"{estimate_relative_time(preset):.2f}x",
            )
        console.print(table)


def show_families(args: argparse.Namespace) -> None:
    table = Table(title="Model families", box=ROUNDED, header_style="bold")
    for column in ("Family", "Default model", "CFG range", "Steps", "Negative prompt"):
        table.add_column(column)
    for family in list_model_families():
        preset = get_model_preset(family)
        low, high, default = recommended_cfg_range(family)
        table.add_row(
            family.value,
            preset.default_model,
            f"{low:g}-{high:g} (default {default:g})",
            f"{preset.min_steps}+ (default {preset.default_steps})",
            "yes" if preset.supports_negative else "no",
        )
    console.print(table)


def show_resolved(args: argparse.Namespace) -> None:
    overrides = {
        name: getattr(args, name)
        for name in ("width", "height", "steps", "cfg", "sampler", "scheduler", "model")
        if getattr(args, name) is not None
    }
    options = ResolutionOptions(
        size_preset=args.size,
        quality_preset=args.quality,
        target_quality=args.target,
        slot={"template_id": args.template, "slot_id": args.slot, "page_size": args.page_size}
        if args.template and args.slot else None,
        overrides=overrides or None,
    )
    engine = create_config_engine(ContextFreeStrategy() if args.context_free else None)
    resolved = engine.resolve(options)

    if args.json:
        print(resolved.model_dump_json(indent=2))
        return

    table = Table(title=f"Resolved with {resolved.strategy_id}", box=ROUNDED, header_style="bold")
    table.add_column("Field")
    table.add_column("Value", style="cyan")
    table.add_column("Source", style="dim")
    for name, source in resolved.sources.items():
        value = getattr(resolved, name)
        table.add_row(name, str(getattr(value, "value", value)), source.value)
    console.print(table)


def show_adapters(args: argparse.Namespace) -> None:
    if args.use_case:
        adapters = recommended_stack(args.checkpoint, args.use_case)
    else:
        adapters = suggest_adapters(args.checkpoint, args.category or None)

    family = get_model_resolver().family_for(args.checkpoint)
    table = Table(title=f"Adapters for {args.checkpoint} ({family.value})", box=ROUNDED, header_style="bold")
    for column in ("Name", "Category", "Position", "Strength", "Trigger"):
        table.add_column(column)
    for adapter in adapters:
        table.add_row(
            adapter.name,
            adapter.category.value,
            adapter.stack_position.value,
            f"{adapter.strength.min:g}/{adapter.strength.recommended:g}/{adapter.strength.max:g}",
            adapter.trigger or "",
        )
    console.print(table)


def show_slots(args: argparse.Namespace) -> None:
    engine = create_config_engine()
    sizes = engine.template_size_map(args.template, args.page_size, args.family)
    if not sizes:
        console.print(f"[red]Unknown template:[/red] {args.template}")
        return

    table = Table(title=f"{args.template} slot sizes", box=ROUNDED, header_style="bold")
    for column in ("Slot", "Size", "Aspect", "Preset"):
        table.add_column(column)
    for slot_id, size in sizes.items():
        table.add_row(slot_id, f"{size.width}x{size.height}", f"{size.aspect_ratio:.3f}", size.preset_id or "custom")
    console.print(table)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="panelgen", description="Inspect generation presets and resolved configs")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    presets = subparsers.add_parser("presets", help="List size and quality presets")
    presets.add_argument("--kind", choices=["size", "quality", "all"], default="all")
    presets.set_defaults(handler=show_presets)

    families = subparsers.add_parser("families", help="List model families and their defaults")
    families.set_defaults(handler=show_families)

    resolve = subparsers.add_parser("resolve", help="Resolve a generation configuration")
    resolve.add_argument("--size", help="Size preset id")
    resolve.add_argument("--quality", help="Quality preset id")
    resolve.add_argument("--target", choices=["low", "medium", "high"], help="Target quality for slot sizing")
    resolve.add_argument("--template", help="Page template id")
    resolve.add_argument("--slot", help="Slot id within the template")
    resolve.add_argument("--page-size", help="Page size preset id")
    resolve.add_argument("--width", type=int)
    resolve.add_argument("--height", type=int)
    resolve.add_argument("--steps", type=int)
    resolve.add_argument("--cfg", type=float)
    resolve.add_argument("--sampler")
    resolve.add_argument("--scheduler")
    resolve.add_argument("--model", help="Checkpoint filename")
    resolve.add_argument("--context-free", action="store_true", help="Use the context-free sizing strategy")
    resolve.add_argument("--json", action="store_true", help="Print the resolved config as JSON")
    resolve.set_defaults(handler=show_resolved)

    adapters = subparsers.add_parser("adapters", help="List adapters compatible with a checkpoint")
    adapters.add_argument("checkpoint", help="Checkpoint filename")
    adapters.add_argument("--category", action="append", choices=["style", "character", "quality", "pose", "concept"])
    adapters.add_argument("--use-case", choices=["comic", "realistic", "anime", "general"], help="Show a recommended stack")
    adapters.set_defaults(handler=show_adapters)

    slots = subparsers.add_parser("slots", help="Show slot sizes for a page template")
    slots.add_argument("template", help="Page template id")
    slots.add_argument("--page-size", help="Page size preset id")
    slots.add_argument("--family", choices=[f.value for f in ModelFamily], default=ModelFamily.SDXL.value)
    slots.set_defaults(handler=show_slots)

    return parser


def main(argv: list[str] | None = None) -> None:
    """Entry point."""
    load_dotenv()
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        args.handler(args)
    except ValueError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise SystemExit(1)


if __name__ == "__main__":
    main()
