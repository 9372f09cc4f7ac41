# tests/architecture/test_architecture.py
# Architecture tests enforcing layering rules.
# - services, schemas and repositories stay free of web frameworks
# - Tornado handlers and FastAPI routers must not contain SQL
# - only the storage layer talks to the database

import ast
import pathlib
import re

import pytest  # type: ignore[import-not-found]

REPO_ROOT = pathlib.Path(__file__).resolve().parents[2]
PACKAGE = REPO_ROOT / "texttide"

WEB_FRAMEWORKS = {"fastapi", "starlette", "tornado"}
DB_LIBS = {"sqlalchemy", "asyncpg", "psycopg2"}


def _iter_py_files(root: pathlib.Path):
    for path in root.rglob("*.py"):
        # skip virtualenv & build outputs
        parts = {"venv", ".venv", "node_modules", "__pycache__"}
        if any(part in parts for part in path.parts):
            continue
        yield path


def _collect_imports(py_path: pathlib.Path) -> set[str]:
    """Return set of imported top-level module names from file."""
    tree = ast.parse(py_path.read_text(encoding="utf-8"), filename=str(py_path))
    imports: set[str] = set()
    for node in ast.walk(tree):
        if isinstance(node, ast.Import):
            for alias in node.names:
                imports.add(alias.name.split(".")[0])
        elif isinstance(node, ast.ImportFrom) and node.module:
            imports.add(node.module.split(".")[0])
    return imports


def _file_contains_sql(py_path: pathlib.Path) -> bool:
    """Heuristic to detect raw SQL or direct DB access in controllers."""
    text = py_path.read_text(encoding="utf-8")
    sql_patterns = [
        r"\bSELECT\s+.+\s+FROM\b",
        r"\bINSERT\s+INTO\b",
        r"\bDELETE\s+FROM\b",
        r"\bUPDATE\s+\w+\s+SET\b",
    ]
    if any(re.search(p, text, flags=re.IGNORECASE) for p in sql_patterns):
        return True
    return bool(_collect_imports(py_path) & DB_LIBS)


# ---------- Tests ----------

@pytest.mark.architecture
@pytest.mark.parametrize("layer", ["services", "schemas", "repositories"])
def test_core_layers_do_not_import_web_frameworks(layer):
    offenders = [
        f for f in _iter_py_files(PACKAGE / layer)
        if _collect_imports(f) & WEB_FRAMEWORKS
    ]
    assert not offenders, f"{layer} must not import web frameworks:\n" + "\n".join(map(str, offenders))


@pytest.mark.architecture
def test_controllers_do_not_contain_sql():
    roots = [PACKAGE / "handlers", PACKAGE / "routers"]
    offenders = [f for root in roots for f in _iter_py_files(root) if _file_contains_sql(f)]
    assert not offenders, "Controllers must not contain SQL; offending files:\n" + "\n".join(map(str, offenders))


@pytest.mark.architecture
def test_only_storage_layer_touches_the_database():
    allowed = {PACKAGE / "db", PACKAGE / "models", PACKAGE / "repositories"}
    offenders = []
    for f in _iter_py_files(PACKAGE):
        if any(root in f.parents for root in allowed):
            continue
        if _collect_imports(f) & DB_LIBS:
            offenders.append(f)
    assert not offenders, "Database access outside the storage layer:\n" + "\n".join(map(str, offenders))
