"""
Inspect HCS codes: detect the family, validate, print the decoded fields.

Usage:
    python scripts/inspect_code.py "HCS-U3|E:F|MOD:c50f30m20|..."
    python scripts/inspect_code.py "$(sed -n 3p profile_output.hcs)"
    python scripts/inspect_code.py CODE1 CODE2 ...

U5 words are unpacked into their bit fields.
"""
import argparse
import sys
from pathlib import Path

# Add parent to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from rich import box
from rich.console import Console
from rich.table import Table

from hcs.codec_u3 import parse_u3
from hcs.codec_u4 import decode_u4
from hcs.codec_u5 import ChineseWord, FusionWord, WesternWord, decode_u5
from hcs.codec_u7 import parse_u7
from hcs.errors import HCSError

console = Console()


def inspect_u3(code: str) -> dict:
    return parse_u3(code)


def inspect_u4(code: str) -> dict:
    normalized, chip = decode_u4(code)
    fields = {"chip": chip, "element": normalized.element}
    fields["modal"] = f"c={normalized.modal_c} f={normalized.modal_f} m={normalized.modal_m}"
    fields["cog"] = (
        f"F={normalized.cog_f} C={normalized.cog_c} V={normalized.cog_v} "
        f"S={normalized.cog_s} Cr={normalized.cog_cr}"
    )
    fields["int"] = f"PB={normalized.pace} SM={normalized.structure} TN={normalized.tone}"
    return fields


def inspect_u5(code: str) -> dict:
    parts = decode_u5(code)
    fields = dict(parts)

    if "western" in parts:
        w = WesternWord.unpack(int(parts["western"], 16))
        fields["western"] = (
            f"{parts['western']}  element={w.element_name} "
            f"modal=c{w.cardinal}/f{w.fixed}/m{w.mutable} pace={w.pace_name} "
            f"high_structure={w.high_structure} sharp_tone={w.sharp_tone}"
        )
    if "chinese" in parts:
        c = ChineseWord.unpack(int(parts["chinese"], 16))
        fields["chinese"] = (
            f"{parts['chinese']}  element={c.element_name} yin_yang={c.yin_yang}/7 "
            f"day_master={c.day_master_name} strength={c.strength}/7 skew={c.skew}/7"
        )
    if "fusion" in parts:
        f = FusionWord.unpack(int(parts["fusion"], 16))
        fields["fusion"] = (
            f"{parts['fusion']}  pattern={f.pattern:04b} pace={f.pace}/7 "
            f"intensity={f.intensity}/7 balance={f.balance}/7 resonance={f.resonance}/7"
        )
    return fields


def inspect_u7(code: str) -> dict:
    return parse_u7(code)


INSPECTORS = {
    "HCS-U3|": inspect_u3,
    "HCS-U4|": inspect_u4,
    "HCS-U5|": inspect_u5,
    "HCS-U7|": inspect_u7,
}


def inspect(code: str) -> tuple[str, dict]:
    for prefix, inspector in INSPECTORS.items():
        if code.startswith(prefix):
            return prefix.rstrip("|"), inspector(code)
    raise HCSError(f"unknown code family: {code[:10]!r}", code="UNKNOWN_CODE")


def main():
    parser = argparse.ArgumentParser(description="Validate and decode HCS codes")
    parser.add_argument("codes", nargs="+", help="One or more HCS codes")
    args = parser.parse_args()

    failures = 0
    for code in args.codes:
        code = code.strip()
        try:
            family, fields = inspect(code)
        except HCSError as e:
            console.print(f"[red]✗ {e.message}[/red]  {code}")
            failures += 1
            continue

        table = Table(box=box.SIMPLE, show_header=False, padding=(0, 1), title=f"[bold]{family}[/bold] ✓")
        table.add_column("Field", style="dim")
        table.add_column("Value", style="bold")
        for key, value in fields.items():
            table.add_row(key, str(value))
        console.print(table)

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
