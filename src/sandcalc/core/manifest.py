import os
import tomllib
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from sandcalc.core.constants import build_constant_table
from sandcalc.core.errors import ManifestError

MANIFEST_FILENAME = "sandcalc.toml"

# Environment variable pointing at a manifest outside the working tree
SANDCALC_CONFIG_VAR = "SANDCALC_CONFIG"


@dataclass
class DisplayConfig:
    """How the CLI prints results."""

    precision: int | None = None  # digits after the decimal point; None = shortest form


@dataclass
class CalcManifest:
    """Contents of a sandcalc.toml file."""

    constants: dict[str, float] = field(default_factory=dict)
    display: DisplayConfig = field(default_factory=DisplayConfig)

    def constant_table(self) -> Mapping[str, float]:
        """Built-in constants merged with the ones declared here."""
        return build_constant_table(self.constants)


def load_manifest(path: Path) -> CalcManifest:
    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ManifestError(f"Cannot read manifest: {e}", path) from e
    except tomllib.TOMLDecodeError as e:
        raise ManifestError(f"Invalid TOML: {e}", path) from e

    constants_data = data.get("constants", {})
    display_data = data.get("display", {})

    if not isinstance(constants_data, dict):
        raise ManifestError("[constants] must be a table", path)
    if not isinstance(display_data, dict):
        raise ManifestError("[display] must be a table", path)

    precision = display_data.get("precision")
    if precision is not None:
        if isinstance(precision, bool) or not isinstance(precision, int):
            raise ManifestError("display.precision must be an integer", path)
        if precision < 0:
            raise ManifestError("display.precision must not be negative", path)

    manifest = CalcManifest(
        constants=dict(constants_data),
        display=DisplayConfig(precision=precision),
    )

    # Validate names and values now so a bad file fails at load time
    try:
        manifest.constant_table()
    except ManifestError as e:
        raise ManifestError(e.message, path) from e

    return manifest


def find_manifest(start: Path) -> Path | None:
    """Walk up from start looking for sandcalc.toml."""
    current = start.resolve()
    for directory in (current, *current.parents):
        candidate = directory / MANIFEST_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_manifest_path(explicit: Path | None, cwd: Path) -> Path | None:
    """Pick the manifest to use: explicit path, then $SANDCALC_CONFIG, then a search from cwd."""
    if explicit is not None:
        return explicit
    env_path = os.environ.get(SANDCALC_CONFIG_VAR, "").strip()
    if env_path:
        return Path(env_path)
    return find_manifest(cwd)
