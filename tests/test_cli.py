import numpy as np
import pytest
import typer
from ase import Atoms
from ase.io import write

from dimer_dynamics.inputs import DimerInputs
from dimer_dynamics.scripts import main_cli


def _write_argon_trimer(tmp_path):
    fp = tmp_path / "ar3.xyz"
    atoms = Atoms("Ar3", positions=[[0.0, 0.0, 0.0], [1.15, 0.0, 0.0], [0.55, 0.95, 0.05]])
    write(fp, atoms)
    return fp


def _evaluate(geometry, **kwargs):
    params = dict(calculator="lj", mode=None, inputs=None, seed=0, mode_out=None, log_level="WARNING")
    params.update(kwargs)
    main_cli.evaluate(geometry=str(geometry), **params)


def test_evaluate_writes_mode(tmp_path, capsys):
    geometry = _write_argon_trimer(tmp_path)
    mode_out = tmp_path / "mode.dat"

    _evaluate(geometry, mode_out=str(mode_out))

    out = capsys.readouterr().out
    assert "curvature:" in out
    assert "evaluations:" in out
    mode = main_cli.read_mode(mode_out, natoms=3)
    np.testing.assert_allclose(np.linalg.norm(mode), 1.0, atol=1e-8)


def test_evaluate_with_mode_and_inputs(tmp_path, capsys):
    geometry = _write_argon_trimer(tmp_path)
    mode_fp = tmp_path / "mode.dat"
    main_cli.write_mode(mode_fp, np.array([[1.0, 0.0, 0.0], [-1.0, 0.0, 0.0], [0.0, 0.0, 0.0]]))
    inputs_fp = tmp_path / "inputs.toml"
    DimerInputs(max_num_rot=2, use_cg_rot=False).save(inputs_fp)

    _evaluate(geometry, mode=str(mode_fp), inputs=str(inputs_fp))

    out = capsys.readouterr().out
    assert "rotations:" in out


def test_unknown_calculator(tmp_path, capsys):
    geometry = _write_argon_trimer(tmp_path)
    with pytest.raises(typer.Exit) as exc:
        _evaluate(geometry, calculator="dft")

    assert exc.value.exit_code == 1
    assert "Unknown calculator" in capsys.readouterr().out


def test_mode_with_wrong_shape(tmp_path):
    geometry = _write_argon_trimer(tmp_path)
    mode_fp = tmp_path / "mode.dat"
    np.savetxt(mode_fp, np.ones((2, 3)))

    with pytest.raises(ValueError):
        _evaluate(geometry, mode=str(mode_fp))


def test_write_inputs(tmp_path):
    main_cli.write_inputs(name=str(tmp_path / "my_inputs"))

    assert DimerInputs.open(tmp_path / "my_inputs.toml") == DimerInputs()
