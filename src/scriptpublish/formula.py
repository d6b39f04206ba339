"""Render and write Homebrew formulae for published scripts.

The formula installs a single script from the release tarball of the
scripts repository and declares one ``depends_on`` per README dependency.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path

FORMULA_TEMPLATE = """# This file was generated by script-publisher.
class {class_name} < Formula
  desc "{description}"
  homepage "{homepage}"
  url "{url}"
  sha256 "{sha256}"
{depends}
  def install
    # Installs the script from its relative path in the tarball.
    bin.install "{script_path}" => "{command}"
  end
end
"""


def formula_class_name(package_name: str) -> str:
    """``unlock-pdf`` -> ``UnlockPdf``."""
    return "".join(part[:1].upper() + part[1:] for part in package_name.split("-"))


def _ruby_string(value: str) -> str:
    return value.replace("\\", "\\\\").replace('"', '\\"')


def _render_depends(dependencies: Sequence[str]) -> str:
    if not dependencies:
        return ""
    lines = [f'  depends_on "{_ruby_string(dep)}"' for dep in dependencies]
    return "\n" + "\n".join(lines) + "\n"


def render_formula(
    *,
    package_name: str,
    description: str,
    homepage: str,
    url: str,
    sha256: str,
    script_path: str,
    dependencies: Sequence[str] = (),
) -> str:
    return FORMULA_TEMPLATE.format(
        class_name=formula_class_name(package_name),
        description=_ruby_string(description),
        homepage=_ruby_string(homepage),
        url=_ruby_string(url),
        sha256=sha256,
        depends=_render_depends(dependencies),
        script_path=_ruby_string(script_path),
        command=_ruby_string(package_name),
    )


def formula_path(formula_dir: Path, package_name: str) -> Path:
    return formula_dir / f"{package_name}.rb"


def write_formula(formula_dir: Path, package_name: str, text: str) -> Path:
    """Create or replace ``Formula/<package_name>.rb``."""
    output = formula_path(formula_dir, package_name)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text, encoding="utf-8")
    return output


__all__ = [
    "FORMULA_TEMPLATE",
    "formula_class_name",
    "formula_path",
    "render_formula",
    "write_formula",
]
