from __future__ import annotations

from potioncalc.core.calculator import FIELDS, Action, CalculatorState
from potioncalc.core.percentage import format_percentage
from potioncalc.core.potions.catalog import POTION_DATA, POTION_IDS, potion_count_limit
from potioncalc.core.service import CalculatorService

HELP_TEXT = (
    "Commands: show, potions, reset, help, quit | "
    "<field> <value> where field is one of " + ", ".join(FIELDS) + " | "
    "potion <id|index> [qty]"
)


def parse_words(text: str) -> list[str]:
    return [w for w in text.strip().split() if w]


def format_state(state: CalculatorState, digits: int = 3) -> str:
    lines = [
        f"Before: Lv.{state.level_before}  {state.experience_before} EXP  "
        f"{format_percentage(state.percentage_before, digits)}%",
    ]
    for pid in POTION_IDS:
        qty = state.potions[pid]
        if qty:
            lines.append(f"  {POTION_DATA[pid].label} x{qty}")
    lines.append(
        f"After:  Lv.{state.level_after}  {state.experience_after} EXP  "
        f"{format_percentage(state.percentage_after, digits)}%"
    )
    return "\n".join(lines)


def format_potions() -> str:
    rows = []
    for i, pid in enumerate(POTION_IDS):
        d = POTION_DATA[pid]
        rows.append(f"{i}: {pid.value} {d.label} (Lv.{d.base_level}-{d.max}, up to {potion_count_limit(d)})")
    return "\n".join(rows)


def _potion_key(word: str):
    if word.isdigit() and int(word) < len(POTION_IDS):
        return POTION_IDS[int(word)]
    return word


def _number(word: str, field: str):
    # Percentages accept decimals; everything else is a whole number.
    if field.startswith("percentage"):
        return float(word)
    return int(word)


def handle_line(service: CalculatorService, text: str) -> dict:
    words = parse_words(text)
    if not words:
        return {"ok": True}

    cmd = words[0].lower()
    args = words[1:]
    digits = service.digits

    if cmd == "help":
        return {"ok": True, "say": HELP_TEXT}

    if cmd == "show":
        return {"ok": True, "say": format_state(service.state, digits)}

    if cmd == "potions":
        return {"ok": True, "say": format_potions()}

    if cmd == "reset":
        r = service.reset()
        if not r.ok:
            return {"ok": False, "say": f"Rejected: {r.error}"}
        return {"ok": True, "say": format_state(r.state, digits)}

    if cmd == "potion":
        if not args:
            return {"ok": False, "say": "Usage: potion <id|index> [qty]"}
        # An empty quantity means none, like clearing the input box.
        raw = args[1] if len(args) > 1 else "0"
        try:
            qty = int(raw)
        except ValueError:
            return {"ok": False, "say": f"Not a whole number: {raw}"}
        action = Action(type="potion", value=qty, potion_id=_potion_key(args[0]))
    elif cmd in FIELDS:
        if not args:
            return {"ok": False, "say": f"Usage: {cmd} <value>"}
        try:
            value = _number(args[0], cmd)
        except ValueError:
            return {"ok": False, "say": f"Not a number: {args[0]}"}
        action = Action(type=cmd, value=value)
    else:
        return {"ok": False, "say": f"Unknown command: {cmd} (try help)"}

    r = service.dispatch(action)
    if not r.ok:
        return {"ok": False, "say": f"Rejected: {r.error}"}
    return {"ok": True, "say": format_state(r.state, digits)}
