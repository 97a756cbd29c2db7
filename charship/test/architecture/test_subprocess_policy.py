from __future__ import annotations

import ast

from ._utils import charship_root, iter_python_files, parse_imports, read_tree


def _has_direct_subprocess_call(tree: ast.AST) -> list[int]:
    lines: list[int] = []
    for node in ast.walk(tree):
        if not isinstance(node, ast.Call):
            continue
        func = node.func
        if not isinstance(func, ast.Attribute):
            continue
        if func.attr not in {"run", "call", "check_call", "check_output", "Popen"}:
            continue
        if not isinstance(func.value, ast.Name):
            continue
        if func.value.id != "subprocess":
            continue
        lines.append(node.lineno)
    return lines


def test_direct_subprocess_usage_is_constrained_to_process_module() -> None:
    root = charship_root()
    allowlist = {"platform/process.py"}

    offenders: list[str] = []
    for file_path in iter_python_files(root):
        rel_str = file_path.relative_to(root).as_posix()
        if rel_str in allowlist:
            continue

        for line in _has_direct_subprocess_call(read_tree(file_path)):
            offenders.append(f"{rel_str}:{line}: direct subprocess call outside allowlist")
        for item in parse_imports(file_path):
            if item.module == "subprocess":
                offenders.append(f"{rel_str}:{item.line}: subprocess import outside allowlist")

    assert not offenders, "Subprocess policy violations:\n" + "\n".join(offenders)
