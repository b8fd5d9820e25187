from __future__ import annotations

import logging
import sys
from pathlib import Path

import numpy as np
import typer
from ase.calculators.emt import EMT
from ase.calculators.lj import LennardJones
from ase.io import read
from typing_extensions import Annotated

from dimer_dynamics.dimer import Dimer
from dimer_dynamics.engines.ase import ASEEngine
from dimer_dynamics.errors import (DegenerateRotationalForceError,
                                   EvaluationError, InvalidTrialAngleError)
from dimer_dynamics.inputs import DimerInputs
from dimer_dynamics.nodes.node import AtomsNode

AVAIL_CALCULATORS = {
    "emt": EMT,
    "lj": LennardJones,
}

LOGGING_FORMAT = "%(asctime)s %(name)s %(levelname)s: %(message)s"

app = typer.Typer()


def _configure_cli_logging(level: str = "WARNING") -> None:
    log_level = getattr(logging, level.upper(), logging.WARNING)
    logging.basicConfig(format=LOGGING_FORMAT, level=log_level, force=True)


def read_mode(fp: Path, natoms: int) -> np.ndarray:
    """
    reads a mode file with one `x y z` row per atom
    """
    mode = np.loadtxt(fp, ndmin=2)
    if mode.shape != (natoms, 3):
        raise ValueError(f"Mode in {fp} has shape {mode.shape}, expected {(natoms, 3)}")
    return mode


def write_mode(fp: Path, mode: np.ndarray) -> None:
    with open(fp, "w") as f:
        for d in mode.reshape(-1, 3):
            f.write(f"{d[0]:20.10E}{d[1]:20.10E}{d[2]:20.10E}\n")


@app.command()
def evaluate(
        geometry: Annotated[str, typer.Argument(help='path to structure file readable by ase')],
        calculator: Annotated[str, typer.Option(
            help=f'ase calculator used for energies and forces: {list(AVAIL_CALCULATORS)}')] = "emt",
        mode: Annotated[str, typer.Option(
            help='file containing the initial dimer orientation, one x y z row per atom. \
                A random orientation is used if not given.')] = None,
        inputs: Annotated[str, typer.Option("--inputs", "-i",
                                            help='path to DimerInputs toml file')] = None,
        seed: Annotated[int, typer.Option(help='seed for the random initial orientation')] = 0,
        mode_out: Annotated[str, typer.Option(
            help='file to write the lowest curvature mode to')] = None,
        log_level: Annotated[str, typer.Option(help='logging level')] = "WARNING"):
    """
    Rotates a dimer into the lowest curvature mode of a structure and reports
    the effective force for the next translation step.
    """
    _configure_cli_logging(log_level)

    if calculator.lower() not in AVAIL_CALCULATORS:
        print(f"Unknown calculator '{calculator}'. Choose from {list(AVAIL_CALCULATORS)}")
        raise typer.Exit(code=1)

    dimer_inputs = DimerInputs.open(inputs) if inputs is not None else DimerInputs()

    atoms = read(geometry)
    node = AtomsNode(structure=atoms)
    if mode is not None:
        orientation = read_mode(Path(mode), natoms=len(atoms))
    else:
        rng = np.random.default_rng(seed)
        orientation = rng.normal(size=(len(atoms), 3))

    engine = ASEEngine(calculator=AVAIL_CALCULATORS[calculator.lower()]())
    dimer = Dimer(node=node, orientation=orientation, engine=engine, inputs=dimer_inputs)

    print(f"Evaluating dimer on: {geometry}...")
    sys.stdout.flush()
    try:
        output = dimer.evaluate()
    except (EvaluationError, InvalidTrialAngleError, DegenerateRotationalForceError) as e:
        print(f"Dimer evaluation failed: {e}")
        raise typer.Exit(code=1)

    print(f"energy (Hartree):        {output.total_energy:.8f}")
    print(f"curvature:               {output.curvature:.6f}")
    print(f"fmax (effective):        {output.fmax:.6f}")
    print(f"fmax (real):             {output.fmax_real:.6f}")
    print(f"rotations:               {output.n_rotations} (converged: {output.rotation_converged})")
    print(f"rotation angle (deg):    {np.degrees(output.rotation_angle):.2f}")
    print(f"evaluations:             {output.n_evaluations}")
    if output.fmax < dimer_inputs.fmax:
        print("Reached accuracy")

    if mode_out is not None:
        write_mode(Path(mode_out), output.curvature_mode)
        print(f"Wrote curvature mode to {mode_out}")


@app.command()
def write_inputs(
        name: Annotated[str, typer.Argument(help='path to output toml file')] = "inputs.toml"):
    """
    Writes the default DimerInputs to a toml file.
    """
    out = Path(name)
    DimerInputs().save(out.parent / (out.stem + ".toml"))
    print(f"Wrote default inputs to {out.parent / (out.stem + '.toml')}")


if __name__ == "__main__":
    app()
