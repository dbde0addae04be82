from __future__ import annotations

from ._utils import find_imports, package_root


def test_direct_rich_imports_are_limited_to_console() -> None:
    offenders = find_imports(package_root(), ("rich",), allow=frozenset({"output/console.py"}))

    assert not offenders, "Direct rich usage policy violations:\n" + "\n".join(offenders)
