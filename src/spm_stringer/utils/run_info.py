"""Run-time info printing utilities."""

from __future__ import annotations

from datetime import datetime
from zoneinfo import ZoneInfo
from typing import Optional

from spm_stringer.stringer import NonlinearStringer


def _fmt_force(x: float) -> str:
    x = float(x)
    if abs(x) >= 1e6:
        return f"{x/1e6:.4g} MN"
    if abs(x) >= 1e3:
        return f"{x/1e3:.4g} kN"
    return f"{x:.4g} N"


def _fmt_float(x: Optional[float], fmt: str = "{:.3g}") -> str:
    if x is None:
        return "n/a"
    return fmt.format(float(x))


def print_run_header(tag: str) -> None:
    # Use a stable timezone so logs are comparable across machines.
    ts = datetime.now(ZoneInfo("Europe/Berlin")).strftime("%Y-%m-%d %H:%M:%S %Z")
    print(f"\n[run] {tag}  start={ts}")


def print_stringer_summary(stringer: NonlinearStringer) -> None:
    c = stringer.concrete
    cap = stringer.capacities
    print(
        f"[stringer] #{stringer.number} grips={stringer.grips}  L={stringer.length:.4g} mm"
        f"  model={c.model.name}"
    )
    print(
        f"[material] fc={c.fc:.3g} MPa  ft={c.ft:.3g} MPa  Ec={c.Ec:.5g} MPa"
        f"  ec={c.ec:.4g}  ecu={c.ecu:.4g}  Ac={c.area:.5g} mm2"
    )
    r = stringer.reinforcement
    if r is None:
        print("[material] reinforcement: none")
    else:
        print(
            f"[material] reinforcement: {r.number_of_bars} x {r.bar_diameter:.3g} mm"
            f"  As={r.area:.5g} mm2  rho={r.ratio:.4g}  fy={r.steel.fy:.4g} MPa  Es={r.steel.Es:.5g} MPa"
        )
    print(
        f"[section] EA={_fmt_force(cap.axial_stiffness)}  xi={cap.stiffness_ratio:.4g}"
        f"  Nr={_fmt_force(cap.cracking_force)}  Nyr={_fmt_force(cap.yield_force)}"
        f"  Nt={_fmt_force(cap.max_compressive_force)}"
        f"  ey={_fmt_float(cap.yield_strain, '{:.4g}')}"
    )


def print_stringer_state(stringer: NonlinearStringer) -> None:
    N1, N3 = stringer.generalized_forces
    eput, epuc = stringer.max_plastic_strain
    ep1, ep3 = stringer.plastic_strains
    print(
        f"[stringer] #{stringer.number} N1={_fmt_force(N1)}  N3={_fmt_force(N3)}"
        f"  state={stringer.force_state.value}"
        f"  cracked={'yes' if stringer.concrete_cracked else 'no'}"
        f"  yielded={'yes' if stringer.steel_yielded else 'no'}"
    )
    print(
        f"[stringer] plastic=({ep1:.4g}, {ep3:.4g}) mm  limits=({eput:.4g}, {epuc:.4g}) mm"
        f"  ductility_exceeded={'yes' if stringer.ductility_exceeded else 'no'}"
    )
