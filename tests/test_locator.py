from __future__ import annotations

from pathlib import Path

from zpatch.tools.locator import PACKAGE_SUFFIX, candidate_paths, find_target, first_patchable, is_native_binary


def _install(root: Path, content: bytes = b"#!/usr/bin/env node\n") -> Path:
    target = root / PACKAGE_SUFFIX
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(content)
    return target


def test_candidate_paths_prefer_newest_nvm_release(tmp_path: Path) -> None:
    for version in ("v18.19.0", "v9.11.2", "v22.3.0", "v20.11.1"):
        (tmp_path / ".nvm" / "versions" / "node" / version).mkdir(parents=True)

    candidates = candidate_paths(tmp_path)
    nvm = [path for path in candidates if ".nvm" in path.parts]

    assert [path.parts[path.parts.index("node") + 1] for path in nvm] == [
        "v22.3.0",
        "v20.11.1",
        "v18.19.0",
        "v9.11.2",
    ]


def test_extra_paths_are_checked_first(tmp_path: Path) -> None:
    extra = tmp_path / "custom" / "cli.js"

    assert candidate_paths(tmp_path, [extra])[0] == extra


def test_native_binaries_are_skipped(tmp_path: Path) -> None:
    native = _install(tmp_path / "native", b"\x7fELF\x02\x01\x01")
    script = _install(tmp_path / "script")

    assert is_native_binary(native)
    assert first_patchable([tmp_path / "missing.js", native, script]) == script


def test_find_target_prefers_explicit_paths(tmp_path: Path) -> None:
    home_install = _install(tmp_path / ".npm-global" / "lib")
    explicit = _install(tmp_path / "pinned")

    assert home_install in candidate_paths(tmp_path)
    assert find_target([tmp_path / "absent.js", explicit], home=tmp_path) == explicit
