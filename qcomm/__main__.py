# qcomm/__main__.py
from __future__ import annotations

import typer
from rich.console import Console
from rich.table import Table

from qcomm.core import QuantumCore
from qcomm.errors import QuantumOperationError
from qcomm.logging_config import setup_logging
from qcomm.operations import MeasureRandom, Teleport
from qcomm.settings import get_settings

app = typer.Typer(help="Quantum core diagnostics CLI")
console = Console()


def _core() -> QuantumCore:
    return QuantumCore.from_settings(get_settings())


def _bits(bits: list[int]) -> str:
    return "".join(str(b) for b in bits)


def _render_status(status: dict) -> Table:
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Key")
    table.add_column("Value", justify="right")
    for key, value in status.items():
        if isinstance(value, dict):
            for sub_key, sub_value in value.items():
                table.add_row(f"{key}.{sub_key}", str(sub_value))
        else:
            table.add_row(key, str(value))
    return table


@app.command()
def status():
    """
    Show the core's system status, including the capability provider report.
    """
    console.print(_render_status(_core().get_system_status()))


@app.command("random")
def random_bits(
    qubits: int = typer.Option(2, help="Register size used to draw bits"),
    bits: int = typer.Option(2, help="Number of bits requested (clamped to --qubits)"),
):
    """
    Draw quantum random bits from a fresh superposed register.
    """
    core = _core()
    try:
        sid = core.create_comm_state(qubit_count=qubits)
        out = core.generate_quantum_random(sid, bits)
    except QuantumOperationError as e:
        raise typer.BadParameter(str(e))
    console.print(f"[bold magenta]bits[/bold magenta] {_bits(out)}")


@app.command()
def bell():
    """
    Prepare a Bell pair on a two-qubit register and measure it.
    """
    core = _core()
    sid = core.create_comm_state(qubit_count=2)
    core.create_entangled_state(sid)
    state = core.get_state_info(sid)
    out = core.perform_operation(sid, MeasureRandom(qubits=[0, 1]))
    console.print(f"[bold magenta]fidelity[/bold magenta] {state.fidelity:.6f}")
    console.print(f"[bold magenta]outcome[/bold magenta] {_bits(out)}")


@app.command()
def teleport(
    qubits: int = typer.Option(3, help="Register size"),
    source: int = typer.Option(0, help="Source qubit"),
    target: int = typer.Option(1, help="Target qubit"),
):
    """
    Run the in-process teleportation sequence and print the Bell measurement.
    """
    core = _core()
    try:
        sid = core.create_comm_state(qubit_count=qubits)
        out = core.perform_operation(sid, Teleport(source=source, target=target))
    except QuantumOperationError as e:
        raise typer.BadParameter(str(e))
    console.print(f"[bold magenta]bell measurement[/bold magenta] {_bits(out)}")


if __name__ == "__main__":
    setup_logging()
    app()
