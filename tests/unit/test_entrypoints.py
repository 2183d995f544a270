import importlib
from pathlib import Path

import tomllib


def test_luxstream_entrypoint_target_is_importable() -> None:
    pyproject_path = Path(__file__).resolve().parents[2] / "pyproject.toml"
    pyproject = tomllib.loads(pyproject_path.read_text(encoding="utf-8"))
    target = pyproject["project"]["scripts"]["luxstream"]
    module_name, symbol = target.split(":")

    module = importlib.import_module(module_name)
    entrypoint = getattr(module, symbol)

    assert callable(entrypoint)
