"""
HCS Lab — profile → code generator.
Entry point. Reads a profile JSON, generates U3/U4/U5/U7 codes, writes the
results next to the input and shows a summary.

Run:
    python main.py profile.json
    python main.py --u3-only --raw-json profile.json

Outputs:
    <base>_output.json   full output (codes, signatures, CHIP, profiles)
    <base>_output.hcs    one U3/U4/U5 code per line
"""
import argparse
import json
import os
import sys
from pathlib import Path

from loguru import logger
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

import config
from hcs.errors import HCSError, ValidationError
from hcs.generator import generator_from_config
from hcs.model import InputProfile, Output

console = Console()


# ── Input / output files ──────────────────────────────────────────────────────

def load_profile(path: Path) -> InputProfile:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ValidationError(f"{path} is not valid JSON: {e}") from e
    except UnicodeDecodeError as e:
        raise ValidationError(f"{path} is not UTF-8 text: {e}") from e
    except OSError as e:
        raise ValidationError(f"cannot read {path}: {e.strerror or e}") from e
    return InputProfile.from_dict(data)


def output_paths(input_path: Path) -> tuple[Path, Path]:
    """<base>_output.json and <base>_output.hcs beside the input file."""
    base = input_path.with_suffix("")
    return (
        base.with_name(f"{base.name}_output.json"),
        base.with_name(f"{base.name}_output.hcs"),
    )


def write_outputs(output: Output, input_path: Path, pretty: bool) -> tuple[Path, Path]:
    json_path, hcs_path = output_paths(input_path)

    with open(json_path, "w") as f:
        json.dump(output.to_dict(), f, indent=2 if pretty else None)
        f.write("\n")

    with open(hcs_path, "w") as f:
        for code in output.codes():
            f.write(code + "\n")

    logger.info(f"Wrote {json_path} and {hcs_path}")
    return json_path, hcs_path


# ── Console display ───────────────────────────────────────────────────────────

def display_output(output: Output):
    table = Table(box=box.ROUNDED, show_header=False, padding=(0, 1))
    table.add_column("Key", style="dim")
    table.add_column("Value", style="bold")

    if output.code_u3:
        table.add_row("HCS-U3", output.code_u3)
    if output.code_u4:
        table.add_row("HCS-U4", output.code_u4)
    if output.code_u5:
        table.add_row("HCS-U5", f"[cyan]{output.code_u5}[/cyan]")
    if output.code_u7:
        table.add_row("HCS-U7", f"[green]{output.code_u7}[/green]")
    table.add_row("CHIP", output.chip)

    ch = output.chinese_profile
    if ch is not None:
        table.add_row("", "")
        table.add_row("Pillars", f"{ch.year_pillar}  {ch.month_pillar}  {ch.day_pillar}  {ch.hour_pillar}")
        table.add_row("Day Master", f"{ch.day_master} ({ch.day_master_type()}, {ch.day_master_strength:.2f})")
        table.add_row("Yin/Yang", f"{ch.yin_yang_type()} ({ch.yin_yang_balance:.2f})")
        table.add_row("Dominant", ch.dominant_element())

    combined = output.combined_profile
    if combined is not None:
        f = combined.fusion
        table.add_row("Fusion ID", f.fusion_id)
        table.add_row("Resonance", f"{f.harmonic_resonance:.2f}  (balance {f.unified_balance:.2f})")
        table.add_row("Rhythm", f.tempo_signals.rhythm)

    console.print(Panel(
        table,
        title=f"[bold]HCS Lab — {output.input.dominant_element}[/bold]",
        border_style="cyan",
        expand=False,
    ))


# ── Entry point ───────────────────────────────────────────────────────────────

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate HCS codes from a profile JSON file")
    parser.add_argument("input", nargs="?", help="Path to the input profile JSON")
    parser.add_argument("--u3-only", action="store_true", help="Generate U3 only (skip U4)")
    parser.add_argument("--u4-only", action="store_true", help="Generate U4 only (skip U3)")
    parser.add_argument("--pretty", action="store_true", help="Indent the JSON output")
    parser.add_argument("--raw-json", action="store_true", help="Print the JSON output instead of the summary")
    parser.add_argument("--version", action="store_true", help="Show version and exit")
    return parser


def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        console.print(f"hcs-lab {config.VERSION}")
        return 0
    if not args.input:
        parser.print_usage(sys.stderr)
        logger.error("No input file given")
        return 1
    if args.u3_only and args.u4_only:
        logger.error("--u3-only and --u4-only are mutually exclusive")
        return 1

    input_path = Path(args.input)
    if not input_path.exists():
        logger.error(f"Input file not found: {input_path}")
        return 1

    try:
        profile = load_profile(input_path)
        generator = generator_from_config()
        output = generator.generate(profile, u3_only=args.u3_only, u4_only=args.u4_only)
        write_outputs(output, input_path, args.pretty)
    except HCSError as e:
        logger.error(f"[{e.code}] {e.message}")
        return 1

    if args.raw_json:
        print(json.dumps(output.to_dict(), indent=2 if args.pretty else None))
    else:
        display_output(output)
    return 0


def configure_logging():
    os.makedirs(config.LOG_DIR, exist_ok=True)
    logger.remove()
    logger.add(
        sys.stderr,
        level=config.LOG_LEVEL,
        format="<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | {message}",
    )
    logger.add(
        os.path.join(config.LOG_DIR, "hcs_{time:YYYY-MM-DD}.log"),
        rotation="1 day",
        retention="30 days",
        level="DEBUG",
    )


if __name__ == "__main__":
    configure_logging()
    sys.exit(main())
