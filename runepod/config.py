"""Loading of YAML configuration files, including the OpenCV storage dialect."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import numpy as np
import yaml

_DTYPES = {"u": np.uint8, "c": np.int8, "w": np.uint16, "s": np.int16, "i": np.int32,
           "f": np.float32, "d": np.float64}


class _Loader(yaml.SafeLoader):
    """Safe loader that understands OpenCV matrix nodes."""


def _construct_matrix(loader: yaml.SafeLoader, node: yaml.Node) -> np.ndarray:
    spec = loader.construct_mapping(node, deep=True)
    dtype = _DTYPES.get(str(spec.get("dt", "d")), np.float64)
    data = np.asarray(spec["data"], dtype=dtype)
    return data.reshape(int(spec["rows"]), int(spec["cols"]))


_Loader.add_constructor("tag:yaml.org,2002:opencv-matrix", _construct_matrix)


def load_config(path: str | Path) -> dict[str, Any]:
    """Read a YAML mapping from ``path``.

    An OpenCV ``%YAML:1.0`` header is accepted and ``!!opencv-matrix`` nodes
    become numpy arrays. Raises ValueError if the document is not a mapping.
    """
    text = Path(path).read_text(encoding="utf-8")
    lines = text.splitlines()
    if lines and lines[0].startswith("%YAML"):
        lines = lines[1:]
    document = yaml.load("\n".join(lines), Loader=_Loader)
    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ValueError(f"{path}: configuration must be a mapping")
    return document